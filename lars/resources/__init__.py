"""Repository resources, the repository error hierarchy and upload results."""

from lars.resources.exceptions import (
    ErrorKind,
    RepositoryBackendError,
    RepositoryBackendIOError,
    RepositoryBackendRequestFailure,
    RepositoryBadDataError,
    RepositoryError,
    RepositoryOperationNotSupported,
    RepositoryResourceCreationError,
    RepositoryResourceDeletionError,
    RepositoryResourceError,
    RepositoryResourceLifecycleError,
    RepositoryResourceUpdateError,
    RepositoryResourceValidationError,
)
from lars.resources.resource import RepositoryResource, create_vanity_url
from lars.resources.result import UploadResult, upload_resource
