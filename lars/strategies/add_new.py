import logging
from typing import List, Optional

from lars.model.state import State
from lars.resources.resource import RepositoryResource
from lars.strategies.base import BaseStrategy, first_match

logger = logging.getLogger(__name__)


class AddNewStrategy(BaseStrategy):
    """
    Always add a new asset, never touching existing ones.

    Use when duplicates are acceptable. The new resource is moved to the
    state configured for "no matching resource" (DRAFT by default).
    """

    def upload_asset(
        self,
        resource: RepositoryResource,
        matching_resources: Optional[List[RepositoryResource]],
    ) -> None:
        # Attachments can only be stored once the asset has an id
        resource.add_asset()
        resource.add_attachments()
        resource.refresh()
        resource.move_to_state(self.get_target_state(first_match(matching_resources)))
        logger.debug(f"Added {resource.name} as {resource.id}")

    def get_target_state(self, matching_resource: Optional[RepositoryResource]) -> State:
        return self.desired_state_if_no_matching_found

    def find_matching_resources(self, resource: RepositoryResource) -> List[RepositoryResource]:
        return []
