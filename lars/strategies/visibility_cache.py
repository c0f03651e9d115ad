"""
Which resource is currently shown at each vanity URL.

A beta and a release may be shown side by side, so every vanity URL has two
slots: one for the visible release and one for the visible beta.
"""

import logging
import threading
from typing import Dict, Optional, Tuple

from lars.model.asset import is_visible_and_web_displayable
from lars.model.state import State
from lars.resources.exceptions import ErrorKind, RepositoryResourceUpdateError
from lars.versioning.compare import is_beta
from lars.versioning.exceptions import AppliesToFormatError, BadVersionError

logger = logging.getLogger(__name__)

Key = Tuple[str, bool]


def is_shown(resource) -> bool:
    """True for a published resource visible on the website."""
    return resource.state == State.PUBLISHED and is_visible_and_web_displayable(resource.asset)


class VisibilityCache:
    """
    Thread-safe map of vanity URL to the visible published resource.

    The cache is filled from a full scan of the repository the first time it
    is used. One instance is meant to be shared by all the uploads of a batch.

    Methods:
    - ensure_populated(connection): Scan the repository unless already done.
    - refresh(connection, ignore_id): Rebuild from a fresh scan.
    - get(vanity_url, beta): The resource currently shown.
    - put(resource): Record a resource as the one shown at its vanity URL.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[Key, object] = {}
        self._connection = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def is_populated(self) -> bool:
        """True once a scan has run, even if it found nothing to cache."""
        with self._lock:
            return self._connection is not None

    def get(self, vanity_url: str, beta: bool = False):
        with self._lock:
            return self._entries.get((vanity_url, beta))

    def put(self, resource) -> None:
        key = (resource.vanity_url, is_beta(resource))
        with self._lock:
            self._entries[key] = resource
        logger.debug(f"{resource.id} is now shown at {key[0]}")

    def clear(self) -> None:
        with self._lock:
            self._entries = {}
            self._connection = None

    def ensure_populated(self, connection) -> None:
        """Fill the cache from ``connection`` unless it already holds its contents."""
        with self._lock:
            if self._connection is connection:
                return
            self._entries = self._scan(connection)
            self._connection = connection

    def refresh(self, connection, ignore_id: Optional[str] = None) -> None:
        """
        Replace the cache contents with a fresh scan of the repository.

        Args:
            connection: The repository to scan
            ignore_id: A resource to leave out, typically the one being uploaded

        Raises:
            RepositoryResourceUpdateError: If two resources are shown at the same
                vanity URL (kind CONSISTENCY)
        """
        entries = self._scan(connection, ignore_id)
        with self._lock:
            self._entries = entries
            self._connection = connection

    @staticmethod
    def _scan(connection, ignore_id: Optional[str] = None) -> Dict[Key, object]:
        entries: Dict[Key, object] = {}
        for resource in connection.get_all_resources():
            if resource.id == ignore_id or not is_shown(resource):
                continue
            try:
                beta = is_beta(resource)
            except (BadVersionError, AppliesToFormatError) as e:
                # Unreadable versions are treated as releases
                logger.warning(
                    f"Resource {resource.name} ({resource.id}) has a malformed "
                    f"applies-to header, caching it as a release: {e}"
                )
                beta = False
            key = (resource.vanity_url, beta)
            existing = entries.get(key)
            if existing is not None:
                raise RepositoryResourceUpdateError(
                    f"There is more than one resource with the vanity URL {key[0]} "
                    f"in state visible: {existing.name} ({existing.id}) and "
                    f"{resource.name} ({resource.id})",
                    resource.id,
                    kind=ErrorKind.CONSISTENCY,
                    conflicting_ids=[existing.id, resource.id],
                )
            entries[key] = resource
        logger.info(f"Visibility cache holds {len(entries)} vanity URLs")
        return entries
