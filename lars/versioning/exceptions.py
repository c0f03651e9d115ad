"""
Exception classes for the versioning module.
"""

from typing import Optional


class VersioningError(Exception):
    """Base exception for all versioning-related errors."""

    pass


class BadVersionError(VersioningError, ValueError):
    """
    Raised when a product version segment is malformed.

    Carries the range being built when the bad value was met so callers can
    report exactly which bound failed.
    """

    def __init__(
        self,
        min_version: Optional[str],
        max_version: Optional[str],
        bad_version: str,
    ):
        self.min_version = min_version
        self.max_version = max_version
        self.bad_version = bad_version
        super().__init__(
            f"Invalid version '{bad_version}' "
            f"(range min={min_version!r}, max={max_version!r}). "
            "Expected up to four dot separated segments: major.minor.micro.qualifier"
        )


class AppliesToFormatError(VersioningError, ValueError):
    """Raised when an applies-to header cannot be parsed."""

    def __init__(self, applies_to: str, message: str = ""):
        self.applies_to = applies_to
        detail = f": {message}" if message else ""
        super().__init__(f"Invalid applies-to header '{applies_to}'{detail}")


class UnknownEditionError(VersioningError, ValueError):
    """Raised when edition checking meets an edition it does not recognise."""

    def __init__(self, edition: str, known_editions):
        self.edition = edition
        self.known_editions = list(known_editions)
        super().__init__(
            f"Unknown product edition '{edition}'. "
            f"Known editions: {', '.join(self.known_editions)}"
        )
