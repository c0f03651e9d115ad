"""
Repository error hierarchy.

Every error names the kind of failure it represents so callers can decide
what to do with it:

- VALIDATION: bad input data, reported with the offending value
- LIFECYCLE: an illegal state transition was requested
- BACKEND: a client call failed, carrying the failing connection
- CONSISTENCY: the repository holds data that contradicts itself
"""

from contextlib import contextmanager
from enum import Enum
from typing import Optional

from lars.model.state import State, StateAction
from lars.remote.exception import (
    ClientException,
    RepositoryIOError,
    RepositoryNotADirectory,
    RepositoryNotFound,
    RequestFailure,
)
from lars.versioning.exceptions import BadVersionError


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    LIFECYCLE = "lifecycle"
    BACKEND = "backend"
    CONSISTENCY = "consistency"


def _name_repository(message: str, connection) -> str:
    if connection is None:
        return message
    location = getattr(connection, "location", None)
    return f"{message} (repository: {location or 'in memory'})"


class RepositoryError(Exception):
    """Base exception for all repository errors."""

    kind = ErrorKind.BACKEND

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


# Backend


class RepositoryBackendError(RepositoryError):
    """Raised when a call to the repository backend fails."""

    kind = ErrorKind.BACKEND

    def __init__(self, message: str, connection=None, cause: Optional[BaseException] = None):
        self.connection = connection
        super().__init__(_name_repository(message, connection), cause)


class RepositoryBackendIOError(RepositoryBackendError):
    pass


class RepositoryBackendRequestFailure(RepositoryBackendError):
    """The backend refused a request."""

    def __init__(self, failure: RequestFailure, connection=None):
        self.status_code = failure.status_code
        super().__init__(str(failure), connection, failure)


class RepositoryOperationNotSupported(RepositoryBackendError):
    pass


# Resources


class RepositoryResourceError(RepositoryError):
    """
    Raised when an operation on one resource fails.

    When the failure came from the backend, ``connection`` is the repository
    that failed and its location is part of the message.
    """

    def __init__(
        self,
        message: str,
        resource_id: Optional[str] = None,
        cause: Optional[BaseException] = None,
        connection=None,
    ):
        self.resource_id = resource_id
        self.connection = connection
        super().__init__(_name_repository(message, connection), cause)


class RepositoryResourceValidationError(RepositoryResourceError):
    kind = ErrorKind.VALIDATION


class RepositoryResourceCreationError(RepositoryResourceError):
    kind = ErrorKind.BACKEND


class RepositoryResourceUpdateError(RepositoryResourceError):
    """
    Raised when a resource cannot be updated.

    With ``kind`` CONSISTENCY it reports two resources that claim the same
    vanity URL; ``conflicting_ids`` names them.
    """

    def __init__(
        self,
        message: str,
        resource_id: Optional[str] = None,
        cause: Optional[BaseException] = None,
        kind: ErrorKind = ErrorKind.BACKEND,
        conflicting_ids=(),
        connection=None,
    ):
        self.kind = kind
        self.conflicting_ids = list(conflicting_ids)
        super().__init__(message, resource_id, cause, connection)


class RepositoryResourceDeletionError(RepositoryResourceError):
    kind = ErrorKind.BACKEND


class RepositoryResourceLifecycleError(RepositoryResourceError):
    """Raised when a lifecycle action is not allowed from the resource's state."""

    kind = ErrorKind.LIFECYCLE

    def __init__(
        self,
        message: str,
        resource_id: Optional[str],
        old_state: Optional[State],
        action: Optional[StateAction],
        cause: Optional[BaseException] = None,
    ):
        self.old_state = old_state
        self.action = action
        super().__init__(message, resource_id, cause)


class RepositoryBadDataError(RepositoryResourceError):
    """Raised when a resource holds a malformed product version."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, resource_id: Optional[str], error: BadVersionError):
        self.min_version = error.min_version
        self.max_version = error.max_version
        self.bad_version = error.bad_version
        super().__init__(f"{message}: {error}", resource_id, error)


@contextmanager
def backend_errors(connection, message: str):
    """
    Translate client exceptions raised in the block into RepositoryBackendError.

    Example:
        with backend_errors(connection, "Failed to list assets"):
            assets = connection.client.get_all_assets()
    """
    try:
        yield
    except RequestFailure as e:
        raise RepositoryBackendRequestFailure(e, connection) from e
    except (RepositoryIOError, RepositoryNotFound, RepositoryNotADirectory) as e:
        raise RepositoryBackendIOError(f"{message}: {e}", connection, e) from e
    except ClientException as e:
        raise RepositoryBackendError(f"{message}: {e}", connection, e) from e
