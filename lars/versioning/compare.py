"""
Precedence rules between two versions of the same logical resource.

Each helper takes two resources and returns one of the arguments it was given
(or None). A resource is either an ``Asset`` or anything carrying one on an
``asset`` attribute, such as a RepositoryResource.
"""

from typing import Optional, TypeVar

from packaging.version import InvalidVersion, Version

from lars.model.asset import Asset
from lars.model.enums import ResourceType

from .applies_to import MinAndMaxVersion, get_min_and_max_version, is_beta_version
from .version import parse_version4

R = TypeVar("R")


def _asset(resource) -> Asset:
    return resource if isinstance(resource, Asset) else resource.asset


def _applies_to(asset: Asset) -> Optional[str]:
    wlp = asset.wlp_information
    if asset.type == ResourceType.INSTALL and wlp.product_version:
        return f"{wlp.product_id}; productVersion={wlp.product_version}"
    return wlp.applies_to


def min_and_max_version(resource) -> MinAndMaxVersion:
    """The product version range a resource applies to."""
    return get_min_and_max_version(_applies_to(_asset(resource)))


def is_beta(resource) -> bool:
    """True when the minimum product version the resource applies to is a beta."""
    minimum = min_and_max_version(resource).min
    return not minimum.is_unbounded and is_beta_version(str(minimum))


def return_non_beta_resource_or_null(resource1: R, resource2: R) -> Optional[R]:
    """
    The non-beta resource when exactly one of the two is a beta.

    Returns None when both are betas or neither is.
    """
    beta1 = is_beta(resource1)
    beta2 = is_beta(resource2)
    if beta1 == beta2:
        return None
    return resource2 if beta1 else resource1


def get_resource_with_higher_version(resource1: R, resource2: R) -> R:
    """
    Compare the free text ``version`` fields.

    When either version is missing or does not parse, ``resource1`` is returned.
    """
    try:
        version1 = Version(_asset(resource1).version or "")
        version2 = Version(_asset(resource2).version or "")
    except InvalidVersion:
        return resource1
    return resource2 if version2 > version1 else resource1


def compare_applies_to(resource1: R, resource2: R) -> R:
    """
    The resource applying to the later product versions.

    Minimums are compared first, then maximums (an open ended range beats a
    closed one). Identical ranges fall back to the resource versions.
    """
    range1 = min_and_max_version(resource1)
    range2 = min_and_max_version(resource2)
    if range1.min != range2.min:
        return resource1 if range1.min > range2.min else resource2
    if range1.max != range2.max:
        return resource1 if range1.max > range2.max else resource2
    return get_resource_with_higher_version(resource1, resource2)


def _compare_product_versions(resource1: R, resource2: R) -> R:
    version1 = _asset(resource1).wlp_information.product_version
    version2 = _asset(resource2).wlp_information.product_version
    if version1 and version2:
        v1 = parse_version4(version1)
        v2 = parse_version4(version2)
        if v1 != v2:
            return resource1 if v1 > v2 else resource2
    return get_resource_with_higher_version(resource1, resource2)


def get_newer_resource(resource1: R, resource2: R) -> R:
    """
    The newer of two versions of the same resource.

    A release always wins over a beta. Otherwise products compare their product
    version and everything else compares applies-to ranges.

    Raises:
        BadVersionError: If a product version in either resource is malformed
    """
    non_beta = return_non_beta_resource_or_null(resource1, resource2)
    if non_beta is not None:
        return non_beta
    if _asset(resource1).type == ResourceType.INSTALL and _asset(resource2).type == ResourceType.INSTALL:
        return _compare_product_versions(resource1, resource2)
    return compare_applies_to(resource1, resource2)
