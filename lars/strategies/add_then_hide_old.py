import logging
from typing import List, Optional

from lars.model.enums import DisplayPolicy
from lars.model.state import State
from lars.resources.exceptions import (
    ErrorKind,
    RepositoryError,
    RepositoryResourceUpdateError,
)
from lars.resources.resource import RepositoryResource
from lars.strategies.add_then_delete import AddThenDeleteStrategy
from lars.strategies.visibility_cache import VisibilityCache, is_shown
from lars.versioning.compare import get_newer_resource, is_beta
from lars.versioning.exceptions import AppliesToFormatError, BadVersionError

logger = logging.getLogger(__name__)


class AddThenHideOldStrategy(AddThenDeleteStrategy):
    """
    Add then delete, and hide whatever else was shown at the same vanity URL.

    Resources that do not match each other can still share a vanity URL, e.g.
    the same feature built for two product versions. Once the new resource is
    published and visible the previous occupant of its vanity URL is hidden,
    so the website shows exactly one release (and at most one beta) per URL.
    """

    def __init__(
        self,
        desired_state_if_matching_found: Optional[State] = None,
        desired_state_if_no_matching_found: State = State.DRAFT,
        cache: Optional[VisibilityCache] = None,
        force_replace: bool = False,
        edition_checking: bool = True,
    ):
        """
        Args:
            desired_state_if_matching_found: None uses the state of the first match
            desired_state_if_no_matching_found: State when nothing matches
            cache: Visibility cache shared with the other uploads of the batch;
                a private one is created when omitted
            force_replace: Replace the first match even when nothing changed
            edition_checking: Validate product editions while generating fields
        """
        super().__init__(
            desired_state_if_matching_found,
            desired_state_if_no_matching_found,
            force_replace=force_replace,
            edition_checking=edition_checking,
        )
        self.cache = cache if cache is not None else VisibilityCache()
        self.hidden_resources: List[RepositoryResource] = []

    def upload_asset(
        self,
        resource: RepositoryResource,
        matching_resources: Optional[List[RepositoryResource]],
    ) -> None:
        matching_resources = matching_resources or []
        self.hidden_resources = []
        self.cache.ensure_populated(resource.connection)

        super().upload_asset(resource, matching_resources)

        if is_shown(resource):
            self.hide_asset(resource, matching_resources)

    def hide_asset(
        self,
        resource: RepositoryResource,
        matching_resources: List[RepositoryResource],
    ) -> None:
        """
        Hide the resource shown at the vanity URL of ``resource``, then record
        ``resource`` as shown there.

        Raises:
            RepositoryResourceUpdateError: If the occupant disappears twice while
                being hidden (kind CONSISTENCY)
        """
        vanity_url = resource.vanity_url
        beta = is_beta(resource)

        occupant = self._occupant(resource, matching_resources, vanity_url, beta)
        if occupant is not None:
            snapshot = self._snapshot(resource, occupant, vanity_url, beta)
            if snapshot is not None and not self._replaced(snapshot, resource, matching_resources):
                self._hide(resource, snapshot)

        self.cache.put(resource)

    def _occupant(self, resource, matching_resources, vanity_url, beta):
        occupant = self.cache.get(vanity_url, beta)
        if occupant is None or self._replaced(occupant, resource, matching_resources):
            return None
        return occupant

    @staticmethod
    def _replaced(occupant, resource, matching_resources) -> bool:
        """True when the occupant is the resource itself or one the upload already replaced."""
        if occupant.id == resource.id:
            return True
        return any(
            occupant.id == match.id or occupant.asset.equivalent_without_attachments(match.asset)
            for match in matching_resources
        )

    def _snapshot(self, resource, occupant, vanity_url, beta):
        """The stored record of the occupant, rebuilding the cache once if it has gone."""
        connection = resource.connection
        try:
            return connection.get_resource(occupant.id)
        except RepositoryError as e:
            logger.warning(
                f"Resource {occupant.name} ({occupant.id}) shown at {vanity_url} "
                f"could not be read ({e}), rebuilding the visibility cache"
            )

        self.cache.refresh(connection, ignore_id=resource.id)
        occupant = self.cache.get(vanity_url, beta)
        if occupant is None:
            return None
        try:
            return connection.get_resource(occupant.id)
        except RepositoryError as e:
            raise RepositoryResourceUpdateError(
                f"Unable to hide {occupant.name} ({occupant.id}) shown at {vanity_url} "
                f"after rebuilding the visibility cache",
                resource.id,
                e,
                kind=ErrorKind.CONSISTENCY,
                conflicting_ids=[resource.id, occupant.id],
            ) from e

    def _hide(self, resource: RepositoryResource, snapshot: RepositoryResource) -> None:
        try:
            snapshot_newer = get_newer_resource(resource, snapshot) is snapshot
        except (BadVersionError, AppliesToFormatError) as e:
            logger.warning(f"Cannot compare {snapshot.id} with {resource.id}: {e}")
            snapshot_newer = False
        if snapshot_newer:
            logger.warning(
                f"Hiding {snapshot.name} ({snapshot.id}) although it looks newer "
                f"than {resource.name} ({resource.id})"
            )
        logger.info(f"Hiding {snapshot.name} ({snapshot.id}) in favour of {resource.id}")

        hidden = RepositoryResource(snapshot.connection, snapshot.asset.model_copy(deep=True))
        hidden.wlp.web_display_policy = DisplayPolicy.HIDDEN
        # Re-upload as a copy of the snapshot in the same state, deleting the snapshot
        hidden.upload(
            AddThenDeleteStrategy(
                None,
                State.DRAFT,
                force_replace=True,
                matching_resource=snapshot,
                edition_checking=self.perform_edition_checking(),
            )
        )
        self.hidden_resources.append(hidden)
