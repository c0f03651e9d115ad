import logging
from typing import List, Optional

from lars.model.enums import UpdateType
from lars.model.state import State
from lars.resources.exceptions import RepositoryResourceUpdateError
from lars.resources.resource import RepositoryResource
from lars.strategies.base import BaseStrategy, first_match

logger = logging.getLogger(__name__)


class AssetOnlyReplacementStrategy(BaseStrategy):
    """
    Overwrite the metadata of the one existing match in place.

    The match keeps its id, attachments and lifecycle state; attachments are
    never touched. A published match is unpublished for the update and then
    moved back to the state it was in.
    """

    def __init__(
        self,
        matching_resource: Optional[RepositoryResource] = None,
        force_replace: bool = False,
        edition_checking: bool = True,
    ):
        """
        Args:
            matching_resource: Overwrite this resource instead of searching for a match
            force_replace: Overwrite even when nothing changed
            edition_checking: Validate product editions while generating fields
        """
        super().__init__(edition_checking=edition_checking)
        self.matching_resource = matching_resource
        self.force_replace = force_replace

    def upload_asset(
        self,
        resource: RepositoryResource,
        matching_resources: Optional[List[RepositoryResource]],
    ) -> None:
        match = first_match(matching_resources)
        if match is None:
            raise RepositoryResourceUpdateError(
                f"No matching resource found when one should have been for {resource.name}"
            )
        if len(matching_resources) > 1:
            others = ", ".join(f"{r.name} ({r.id})" for r in matching_resources[1:])
            logger.warning(
                f"Found {len(matching_resources)} resources matching {resource.name}, "
                f"only {match.id} will be updated. Also matching: {others}"
            )

        if self.force_replace or resource.update_required(match) == UpdateType.UPDATE:
            self._update(resource, match)
        else:
            resource.adopt(match)

    def _update(self, resource: RepositoryResource, match: RepositoryResource) -> None:
        initial_state: State = match.state
        # A published asset cannot be overwritten
        if initial_state == State.PUBLISHED:
            match.unpublish()

        resource.overwrite_asset_data(match)
        resource.update_asset()
        resource.refresh()
        resource.move_to_state(initial_state)

    def find_matching_resources(self, resource: RepositoryResource) -> List[RepositoryResource]:
        if self.matching_resource is not None:
            return [self.matching_resource]
        return resource.find_matching_resources()
