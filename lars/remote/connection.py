"""Repository connections: a write client plus the location it points at."""

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Union

from lars.model.enums import ResourceType
from lars.remote.client import WriteClient
from lars.remote.memory import MemoryWriteClient
from lars.remote.singlefile import SingleFileWriteClient

if TYPE_CHECKING:
    from lars.resources.resource import RepositoryResource

logger = logging.getLogger(__name__)

MEMORY_LOCATION = ":memory:"


class RepositoryConnection:
    """
    Access to one repository.

    ``location`` is the path or URL of the repository, or None for a
    repository that only exists in memory. It is used in error messages.
    """

    def __init__(self, client: WriteClient):
        self.client = client

    @property
    def location(self) -> Optional[str]:
        return self.client.location

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.location!r})"

    def check_status(self) -> None:
        """
        Raises:
            RepositoryBackendError: If the repository cannot be used
        """
        from lars.resources.exceptions import backend_errors

        with backend_errors(self, "Repository is not available"):
            self.client.check_status()

    def get_all_resources(self, type: Optional[ResourceType] = None) -> List["RepositoryResource"]:
        """Every resource in the repository, optionally only those of one type."""
        # Import here to avoid circular dependency
        from lars.resources.exceptions import backend_errors
        from lars.resources.resource import RepositoryResource

        with backend_errors(self, "Failed to list resources"):
            assets = (
                self.client.get_all_assets()
                if type is None
                else self.client.get_assets(type)
            )
        return [RepositoryResource(self, asset) for asset in assets]

    def get_resource(self, resource_id: str) -> "RepositoryResource":
        """
        Raises:
            RepositoryBackendError: If there is no resource with this id
        """
        from lars.resources.exceptions import backend_errors
        from lars.resources.resource import RepositoryResource

        with backend_errors(self, f"Failed to read resource {resource_id}"):
            asset = self.client.get_asset(resource_id)
        return RepositoryResource(self, asset)

    def find_resources(self, search: str, type: Optional[ResourceType] = None) -> List["RepositoryResource"]:
        """Resources whose name, short name or description contains ``search`` (case insensitive)."""
        needle = search.lower()
        found = []
        for resource in self.get_all_resources(type):
            asset = resource.asset
            haystack = [
                asset.name,
                asset.description,
                asset.short_description,
                asset.wlp_information.short_name,
                asset.wlp_information.provide_feature,
            ]
            if any(needle in text.lower() for text in haystack if text):
                found.append(resource)
        return found


class MemoryRepositoryConnection(RepositoryConnection):
    def __init__(self):
        super().__init__(MemoryWriteClient())


class SingleFileRepositoryConnection(RepositoryConnection):
    def __init__(self, path: Union[str, Path]):
        super().__init__(SingleFileWriteClient(path))

    @classmethod
    def create_empty_repository(cls, path: Union[str, Path]) -> "SingleFileRepositoryConnection":
        """
        Raises:
            RepositoryBackendError: If the file already exists or cannot be written
        """
        from lars.resources.exceptions import backend_errors

        connection = cls(path)
        with backend_errors(connection, "Failed to create repository"):
            SingleFileWriteClient.create_empty_repository(path)
        return connection


def get_connection(location: Optional[Union[str, Path]] = None) -> RepositoryConnection:
    """
    Open the repository at ``location``.

    None or ``:memory:`` gives a fresh in-memory repository; anything else is
    the path of a single file JSON repository.
    """
    if location is None or str(location) == MEMORY_LOCATION:
        logger.debug("Using in-memory repository")
        return MemoryRepositoryConnection()
    path = Path(os.path.expanduser(str(location)))
    logger.debug(f"Using single file repository {path}")
    return SingleFileRepositoryConnection(path)
