"""
Upload strategies.

A strategy decides how a resource being uploaded is reconciled with the
resources already in the repository that match it: whether to add a new
asset, overwrite one, replace one, or hide the one currently shown.
"""

from abc import ABCMeta, abstractmethod
from typing import List, Optional

from lars.model.state import State
from lars.resources.resource import RepositoryResource


class UploadStrategy(metaclass=ABCMeta):
    """
    Methods:
    - upload_asset(resource, matching_resources): Perform the upload.
    - find_matching_resources(resource): The existing resources to reconcile with.
    - perform_edition_checking(): Whether product editions are validated.
    """

    @abstractmethod
    def upload_asset(
        self,
        resource: RepositoryResource,
        matching_resources: List[RepositoryResource],
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    def find_matching_resources(
        self, resource: RepositoryResource
    ) -> List[RepositoryResource]:
        raise NotImplementedError

    @abstractmethod
    def perform_edition_checking(self) -> bool:
        raise NotImplementedError


class BaseStrategy(UploadStrategy):
    """
    Common state handling.

    By default a resource with no match ends up in DRAFT and a resource with a
    match takes the state of the first match.
    """

    def __init__(
        self,
        desired_state_if_matching_found: Optional[State] = None,
        desired_state_if_no_matching_found: State = State.DRAFT,
        edition_checking: bool = True,
    ):
        """
        Args:
            desired_state_if_matching_found: State to use when a match exists.
                None means the state of the first match.
            desired_state_if_no_matching_found: State to use when nothing matches
            edition_checking: Validate product editions while generating fields
        """
        self.desired_state_if_matching_found = desired_state_if_matching_found
        self.desired_state_if_no_matching_found = desired_state_if_no_matching_found
        self.edition_checking = edition_checking

    def calculate_target_state(self, matching_resource: Optional[RepositoryResource]) -> State:
        if matching_resource is None:
            return self.desired_state_if_no_matching_found
        if self.desired_state_if_matching_found is None:
            return matching_resource.state
        return self.desired_state_if_matching_found

    def find_matching_resources(
        self, resource: RepositoryResource
    ) -> List[RepositoryResource]:
        return resource.find_matching_resources()

    def perform_edition_checking(self) -> bool:
        return self.edition_checking


def first_match(matching_resources: Optional[List[RepositoryResource]]) -> Optional[RepositoryResource]:
    return matching_resources[0] if matching_resources else None
