"""Product versions, applies-to headers and resource precedence."""

from .applies_to import (
    BETA_REGEX,
    MinAndMaxVersion,
    get_min_and_max_version,
    is_beta_version,
    parse_applies_to,
    validate_editions,
)
from .compare import (
    compare_applies_to,
    get_newer_resource,
    get_resource_with_higher_version,
    is_beta,
    return_non_beta_resource_or_null,
)
from .exceptions import (
    AppliesToFormatError,
    BadVersionError,
    UnknownEditionError,
    VersioningError,
)
from .version import (
    MAX_VERSION,
    MIN_VERSION,
    Version4Digit,
    compare_versions,
    parse_version4,
)

__all__ = [
    "BETA_REGEX",
    "MAX_VERSION",
    "MIN_VERSION",
    "AppliesToFormatError",
    "BadVersionError",
    "MinAndMaxVersion",
    "UnknownEditionError",
    "Version4Digit",
    "VersioningError",
    "compare_applies_to",
    "compare_versions",
    "get_min_and_max_version",
    "get_newer_resource",
    "get_resource_with_higher_version",
    "is_beta",
    "is_beta_version",
    "parse_applies_to",
    "parse_version4",
    "return_non_beta_resource_or_null",
    "validate_editions",
]
