import logging
from typing import List, Optional

from lars.model.enums import UpdateType
from lars.model.state import State
from lars.resources.resource import RepositoryResource
from lars.strategies.add_new import AddNewStrategy
from lars.strategies.base import first_match

logger = logging.getLogger(__name__)


class AddThenDeleteStrategy(AddNewStrategy):
    """
    Upload the resource as a new asset, then delete the resources it replaces.

    Matching resources are only deleted once the new resource has reached its
    target state, so a failed upload never leaves the repository without a
    valid copy. When the resource is unchanged from its first match nothing
    is uploaded: the stored record is adopted and any further duplicates are
    deleted.
    """

    def __init__(
        self,
        desired_state_if_matching_found: Optional[State] = None,
        desired_state_if_no_matching_found: State = State.DRAFT,
        force_replace: bool = False,
        matching_resource: Optional[RepositoryResource] = None,
        edition_checking: bool = True,
    ):
        """
        Args:
            desired_state_if_matching_found: None uses the state of the first match
            desired_state_if_no_matching_found: State when nothing matches
            force_replace: Replace the first match even when nothing changed
            matching_resource: Replace this resource instead of searching for matches
            edition_checking: Validate product editions while generating fields
        """
        super().__init__(
            desired_state_if_matching_found,
            desired_state_if_no_matching_found,
            edition_checking,
        )
        self.force_replace = force_replace
        self.matching_resource = matching_resource
        self.deleted_resources: List[RepositoryResource] = []

    def _changes(self, resource: RepositoryResource, match: Optional[RepositoryResource]):
        """(upload needed, delete originals) for ``resource`` against ``match``."""
        if self.force_replace:
            return True, match is not None

        update_type = resource.update_required(match)
        if update_type != UpdateType.NOTHING:
            return True, update_type == UpdateType.UPDATE

        # Asset unchanged, check attachments just in case they have changed
        for attachment in resource.attachments:
            update_type = resource.attachment_update_required(attachment, match)
            if update_type != UpdateType.NOTHING:
                return True, update_type == UpdateType.UPDATE
        return False, False

    def upload_asset(
        self,
        resource: RepositoryResource,
        matching_resources: Optional[List[RepositoryResource]],
    ) -> None:
        matching_resources = matching_resources or []
        match = first_match(matching_resources)
        self.deleted_resources = []

        do_upload, delete_original = self._changes(resource, match)

        if do_upload:
            super().upload_asset(resource, matching_resources)
            if delete_original:
                for old in matching_resources:
                    logger.info(f"Deleting {old.name} ({old.id}), replaced by {resource.id}")
                    old.delete()
                self.deleted_resources = list(matching_resources)
        else:
            # Identical as far as we are concerned, but the stored record also
            # carries the fields the repository set, the id included
            resource.adopt(match)
            for duplicate in matching_resources[1:]:
                logger.info(f"Deleting duplicate {duplicate.name} ({duplicate.id})")
                duplicate.delete()
            self.deleted_resources = list(matching_resources[1:])
        resource.refresh()

    def find_matching_resources(self, resource: RepositoryResource) -> List[RepositoryResource]:
        if self.matching_resource is not None:
            return [self.matching_resource]
        return resource.find_matching_resources()

    def get_target_state(self, matching_resource: Optional[RepositoryResource]) -> State:
        return self.calculate_target_state(matching_resource)
