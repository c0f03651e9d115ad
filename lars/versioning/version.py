"""
Four segment product versions.

Liberty product versions look like ``8.5.5.9``: major, minor and micro are
integers and the fourth segment is a qualifier. Two sentinels stand in for
missing bounds of an applies-to range: MIN_VERSION (no version given, so the
range starts below every real version) and MAX_VERSION (a trailing ``+``, so
the range never ends).
"""

import re
from typing import Optional, Tuple

from .exceptions import BadVersionError

JAVA_INT_MAX = 2**31 - 1

_NUMERIC = re.compile(r"^\d+$")
_QUALIFIER = re.compile(r"^[A-Za-z0-9_-]+$")

# Ordering rank: lower sentinel, concrete versions, upper sentinel
_LOWER, _CONCRETE, _UPPER = -1, 0, 1


class Version4Digit:
    """
    A major.minor.micro.qualifier version.

    Comparison is segment by segment; the qualifier compares numerically when
    both qualifiers are numeric and lexically otherwise. MIN_VERSION sorts
    below every concrete version and MAX_VERSION above every concrete version,
    even one with the same digits.
    """

    def __init__(
        self,
        major: int,
        minor: int = 0,
        micro: int = 0,
        qualifier: str = "0",
        _rank: int = _CONCRETE,
    ):
        self.major = int(major)
        self.minor = int(minor)
        self.micro = int(micro)
        self.qualifier = str(qualifier)
        self._rank = _rank

    @property
    def is_unbounded(self) -> bool:
        """True for the two sentinels."""
        return self._rank != _CONCRETE

    def _qualifier_key(self) -> Tuple[int, object]:
        if _NUMERIC.match(self.qualifier):
            return (0, int(self.qualifier))
        return (1, self.qualifier)

    def _key(self):
        return (
            self._rank,
            self.major,
            self.minor,
            self.micro,
            self._qualifier_key(),
        )

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.micro}.{self.qualifier}"

    def __repr__(self) -> str:
        if self is MIN_VERSION:
            return "MIN_VERSION"
        if self is MAX_VERSION:
            return "MAX_VERSION"
        return f"Version4Digit('{self}')"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Version4Digit):
            return False
        return self._key() == other._key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, Version4Digit):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other) -> bool:
        if not isinstance(other, Version4Digit):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other) -> bool:
        if not isinstance(other, Version4Digit):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other) -> bool:
        if not isinstance(other, Version4Digit):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self) -> int:
        return hash(self._key())


MIN_VERSION = Version4Digit(0, 0, 0, "0", _rank=_LOWER)
MAX_VERSION = Version4Digit(JAVA_INT_MAX, 0, 0, "0", _rank=_UPPER)


def parse_version4(
    version_string: str,
    min_version: Optional[str] = None,
    max_version: Optional[str] = None,
) -> Version4Digit:
    """
    Parse a product version string.

    Missing trailing segments default to zero, so ``8.5.5`` is ``8.5.5.0``.

    Args:
        version_string: Version such as "8.5.5.9"
        min_version: Lower bound of the range being parsed, for diagnostics
        max_version: Upper bound of the range being parsed, for diagnostics

    Returns:
        Version4Digit

    Raises:
        BadVersionError: If any segment is malformed. Nothing is coerced to zero.
    """
    if version_string is None:
        raise BadVersionError(min_version, max_version, "None")

    text = str(version_string).strip()
    parts = text.split(".")
    if not text or len(parts) > 4:
        raise BadVersionError(min_version, max_version, text)

    for segment in parts[:3]:
        if not _NUMERIC.match(segment):
            raise BadVersionError(min_version, max_version, text)
    if len(parts) == 4 and not _QUALIFIER.match(parts[3]):
        raise BadVersionError(min_version, max_version, text)

    numbers = [int(p) for p in parts[:3]] + [0] * (3 - len(parts[:3]))
    qualifier = parts[3] if len(parts) == 4 else "0"
    return Version4Digit(numbers[0], numbers[1], numbers[2], qualifier)


def compare_versions(version1: str, version2: str) -> int:
    """
    Compare two product version strings.

    Returns:
        -1 if version1 < version2
         0 if version1 == version2
         1 if version1 > version2

    Raises:
        BadVersionError: If either version string is invalid
    """
    v1 = parse_version4(version1)
    v2 = parse_version4(version2)

    if v1 < v2:
        return -1
    elif v1 > v2:
        return 1
    else:
        return 0
