"""
Explicit outcome of an upload.

``upload_resource`` is the call a publishing workflow makes: instead of
letting repository errors propagate it returns an UploadResult, so the caller
has to look at whether the upload worked and, if not, what kind of failure it
was.
"""

import logging
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict

from lars.resources.exceptions import ErrorKind, RepositoryBadDataError, RepositoryError
from lars.versioning.exceptions import BadVersionError

if TYPE_CHECKING:
    from lars.strategies.base import UploadStrategy

logger = logging.getLogger(__name__)


class UploadResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    ok: bool
    resource: object
    error: Optional[RepositoryError] = None
    kind: Optional[ErrorKind] = None

    def raise_for_error(self) -> None:
        """Re-raise the error of a failed upload."""
        if self.error is not None:
            raise self.error


def upload_resource(resource, strategy: "UploadStrategy") -> UploadResult:
    """
    Upload ``resource`` with ``strategy`` and report the outcome.

    Args:
        resource: The RepositoryResource to upload
        strategy: How to reconcile it with matching resources

    Returns:
        UploadResult. ``ok`` is False when a repository error aborted the
        upload; ``error`` and ``kind`` then describe it.
    """
    try:
        try:
            resource.upload(strategy)
        except BadVersionError as e:
            raise RepositoryBadDataError("Bad version data", resource.id, e) from e
    except RepositoryError as e:
        logger.error(f"Upload of {resource.name} failed ({e.kind.value}): {e}")
        return UploadResult(ok=False, resource=resource, error=e, kind=e.kind)
    logger.info(f"Uploaded {resource.name} as {resource.id} ({resource.state.value})")
    return UploadResult(ok=True, resource=resource)
