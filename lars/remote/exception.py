"""
Transport level exceptions raised by repository clients.

These never leave the resource layer: RepositoryResource translates them into
the repository error hierarchy in lars.resources.exceptions.
"""

from typing import Optional


class ClientException(Exception):
    """Base exception for all client failures."""

    pass


class RequestFailure(ClientException):
    """Raised when the backend refuses a request."""

    def __init__(self, status_code: int, message: str, asset_id: Optional[str] = None):
        self.status_code = status_code
        self.asset_id = asset_id
        super().__init__(f"Request failed ({status_code}): {message}")


class AssetNotFound(RequestFailure):
    """Raised when an asset or attachment id is unknown to the backend."""

    def __init__(self, asset_id: str, attachment_id: Optional[str] = None):
        self.attachment_id = attachment_id
        what = f"Attachment {attachment_id} of asset" if attachment_id else "Asset"
        super().__init__(404, f"{what} {asset_id} not found", asset_id)


class RepositoryNotADirectory(ClientException):
    """Raised when the attachment store of a repository is not a directory."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"{path} is not a directory")


class RepositoryIOError(ClientException):
    """Raised when repository storage cannot be read or written."""

    def __init__(self, location, message: str = ""):
        self.location = location
        detail = f": {message}" if message else ""
        super().__init__(f"I/O error on repository {location}{detail}")


class RepositoryLockError(RepositoryIOError):
    """Raised when the repository lock cannot be acquired in time."""

    def __init__(self, lock_file, timeout: float):
        self.lock_file = lock_file
        super().__init__(lock_file, f"could not acquire lock within {timeout} seconds")


class RepositoryNotFound(ClientException):
    """Raised when the repository itself does not exist."""

    def __init__(self, location):
        self.location = location
        super().__init__(f"Repository {location} does not exist")
