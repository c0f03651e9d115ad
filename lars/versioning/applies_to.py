"""
Parsing of the applies-to header.

An applies-to header names the products a resource can be installed into, for
example::

    com.ibm.websphere.appserver; productVersion=8.5.5.9+; productEdition="BASE,ND"

Product clauses are separated by commas and attributes within a clause by
semicolons; a comma or semicolon inside double quotes belongs to the value.
"""

import logging
import re
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from lars.model.asset import AppliesToFilterInfo, FilterVersion

from .exceptions import AppliesToFormatError, UnknownEditionError
from .version import MAX_VERSION, MIN_VERSION, Version4Digit, parse_version4

logger = logging.getLogger(__name__)

VERSION_ATTRIBUTE = "productVersion"
EDITION_ATTRIBUTE = "productEdition"
INSTALL_TYPE_ATTRIBUTE = "productInstallType"

EARLY_ACCESS_LABEL = "Betas"

# Calendar style beta versions, e.g. 2016.1.0.0
BETA_REGEX = re.compile(r"^[2-9][0-9][0-9][0-9][.].*")

ALL_EDITIONS = ["Liberty Core", "Base", "Express", "Developers", "ND", "z/OS"]
BETA_EDITIONS = ["Betas", "Bluemix"]

EDITION_NAMES: Dict[str, str] = {
    "Core": "Liberty Core",
    "CORE": "Liberty Core",
    "LIBERTY_CORE": "Liberty Core",
    "BASE": "Base",
    "DEVELOPERS": "Developers",
    "EXPRESS": "Express",
    "EARLY_ACCESS": "Betas",
    "zOS": "z/OS",
}

# Raw edition tokens accepted when edition checking is switched on
KNOWN_RAW_EDITIONS = frozenset(
    list(EDITION_NAMES)
    + ["BASE_ILAN", "ND", "ND_ILAN", "zOS_ILAN", "DEVELOPERS_ILAN", "EXPRESS_ILAN"]
)


class MinAndMaxVersion(NamedTuple):
    min: Version4Digit
    max: Version4Digit


def is_beta_version(version: Optional[str]) -> bool:
    """True for calendar style beta product versions."""
    return bool(version) and BETA_REGEX.match(version) is not None


def _value(attribute: str) -> str:
    value = attribute.split("=", 1)[1].strip() if "=" in attribute else ""
    if value.startswith('"'):
        return value[1:-1] if value.endswith('"') and len(value) > 1 else value[1:]
    return value


def _labels(version: str) -> Tuple[str, str]:
    """Display label and compatibility label for a product version."""
    if is_beta_version(version):
        return EARLY_ACCESS_LABEL, EARLY_ACCESS_LABEL
    # The label is the first three dot components
    return ".".join(version.split(".")[:3]), version


def _split_clauses(applies_to: str) -> List[List[str]]:
    clauses: List[List[str]] = []
    current: List[str] = []
    quoted = False
    start = 0
    for index, char in enumerate(applies_to):
        if char == '"':
            quoted = not quoted
        elif not quoted and char in ",;":
            current.append(applies_to[start:index])
            start = index + 1
            if char == ",":
                clauses.append(current)
                current = []
    if quoted:
        raise AppliesToFormatError(applies_to, "unbalanced quotes")
    current.append(applies_to[start:])
    clauses.append(current)
    return clauses


def _parse_clause(
    applies_to: str, tokens: List[str], edition_names: Dict[str, str]
) -> AppliesToFilterInfo:
    info = AppliesToFilterInfo(product_id=tokens[0].strip())
    if not info.product_id:
        raise AppliesToFormatError(applies_to, "missing product id")

    for token in tokens[1:]:
        attribute = token.strip()
        if attribute.startswith(VERSION_ATTRIBUTE):
            version = _value(attribute)
            unbounded = version.endswith("+")
            if unbounded:
                version = version[:-1]
            label, compatibility_label = _labels(version)
            info.min_version = FilterVersion(
                value=version,
                inclusive=True,
                label=label,
                compatibility_label=compatibility_label,
            )
            if not unbounded:
                info.max_version = FilterVersion(
                    value=version,
                    inclusive=True,
                    label=label,
                    compatibility_label=compatibility_label,
                )
        elif attribute.startswith(EDITION_ATTRIBUTE):
            raw = _value(attribute).split(",")
            info.raw_editions = raw
            info.editions = [edition_names.get(e, e) for e in raw]
        elif attribute.startswith(INSTALL_TYPE_ATTRIBUTE):
            info.install_type = _value(attribute)
    return info


def parse_applies_to(
    applies_to: Optional[str],
    edition_names: Optional[Dict[str, str]] = None,
    absent_editions: Optional[List[str]] = None,
) -> List[AppliesToFilterInfo]:
    """
    Parse an applies-to header into one filter entry per product clause.

    A clause without ``productVersion`` has neither bound set. ``V`` sets both
    bounds to V and ``V+`` sets only the minimum. When the last clause names no
    editions it is given every edition (or the beta editions for a beta
    version).

    Args:
        applies_to: The header, None or empty gives no entries
        edition_names: Overrides the raw edition to display name table
        absent_editions: Overrides the editions used when none are given

    Returns:
        List of AppliesToFilterInfo, in header order

    Raises:
        AppliesToFormatError: If a clause has no product id or quotes are unbalanced
    """
    if applies_to is None or not applies_to.strip():
        return []

    names = EDITION_NAMES if edition_names is None else edition_names
    result = [
        _parse_clause(applies_to, tokens, names)
        for tokens in _split_clauses(applies_to)
    ]

    last = result[-1]
    if not last.editions:
        if (
            last.min_version is not None
            and last.min_version.compatibility_label == EARLY_ACCESS_LABEL
        ):
            last.editions = list(BETA_EDITIONS)
        else:
            last.editions = list(
                ALL_EDITIONS if absent_editions is None else absent_editions
            )
    return result


def get_min_and_max_version(applies_to: Optional[str]) -> MinAndMaxVersion:
    """
    The overall product version range an applies-to header covers.

    No version anywhere gives (MIN_VERSION, MAX_VERSION). Across several
    clauses the lowest minimum and highest maximum win.

    Raises:
        BadVersionError: If a version in the header is malformed
    """
    lowest: Optional[Version4Digit] = None
    highest: Optional[Version4Digit] = None
    for info in parse_applies_to(applies_to):
        if info.min_version is None:
            low, high = MIN_VERSION, MAX_VERSION
        else:
            minimum = info.min_version.value
            maximum = info.max_version.value if info.max_version else None
            low = parse_version4(minimum, minimum, maximum)
            high = (
                parse_version4(maximum, minimum, maximum)
                if maximum is not None
                else MAX_VERSION
            )
        lowest = low if lowest is None or low < lowest else lowest
        highest = high if highest is None or high > highest else highest

    return MinAndMaxVersion(lowest or MIN_VERSION, highest or MAX_VERSION)


def validate_editions(
    filter_info: Iterable[AppliesToFilterInfo],
    known_editions: Iterable[str] = KNOWN_RAW_EDITIONS,
) -> None:
    """
    Check every raw edition token against the known editions.

    Raises:
        UnknownEditionError: On the first token that is not known
    """
    known = set(known_editions)
    for info in filter_info:
        for edition in info.raw_editions:
            if edition not in known:
                raise UnknownEditionError(edition, sorted(known))
    logger.debug("Edition check passed")
