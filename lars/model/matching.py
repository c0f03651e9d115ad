"""
Identity keys used to decide whether two assets are the same logical resource.

Every asset is identified by type, name and provider name. Features and
products extend that key: features add their symbolic name, version and
applies-to filter, install products their product version and add-ons their
applies-to filter. The filter is always regenerated from the applies-to
header rather than read from the stored record, since records written by
older clients may hold filter info generated by different rules.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from lars.model.asset import AppliesToFilterInfo, Asset
from lars.model.enums import ResourceType
from lars.versioning.applies_to import parse_applies_to

EXTENDED_MATCHING_TYPES = frozenset(
    {ResourceType.FEATURE, ResourceType.INSTALL, ResourceType.ADDON}
)


def _same_set(
    mine: Optional[Sequence[AppliesToFilterInfo]],
    theirs: Optional[Sequence[AppliesToFilterInfo]],
) -> bool:
    if mine is None or theirs is None:
        return mine is None and theirs is None
    if len(mine) != len(theirs):
        return False
    return all(info in mine for info in theirs) and all(
        info in theirs for info in mine
    )


@dataclass(frozen=True, eq=False)
class MatchingData:
    """Identity key of an asset. Equality is the matching rule."""

    type: Optional[ResourceType]
    name: Optional[str]
    provider_name: Optional[str]
    extended: bool = False
    provide_feature: Optional[str] = None
    version: Optional[str] = None
    applies_to_filter_info: Optional[Tuple[AppliesToFilterInfo, ...]] = None

    def __eq__(self, other) -> bool:
        if not isinstance(other, MatchingData):
            return NotImplemented
        if (self.type, self.name, self.provider_name) != (
            other.type,
            other.name,
            other.provider_name,
        ):
            return False
        if self.extended != other.extended:
            return False
        if not self.extended:
            return True
        return (
            self.provide_feature == other.provide_feature
            and self.version == other.version
            # Order of filter entries is irrelevant
            and _same_set(self.applies_to_filter_info, other.applies_to_filter_info)
        )

    def __hash__(self) -> int:
        return hash((self.type, self.name, self.provider_name, self.provide_feature, self.version))


def create_matching_data(asset: Asset) -> MatchingData:
    """Build the identity key for ``asset``."""
    base = dict(type=asset.type, name=asset.name, provider_name=asset.provider_name)
    if asset.type not in EXTENDED_MATCHING_TYPES:
        return MatchingData(**base)

    wlp = asset.wlp_information
    if asset.type == ResourceType.INSTALL:
        return MatchingData(**base, extended=True, version=wlp.product_version)

    filter_info = tuple(parse_applies_to(wlp.applies_to))
    if asset.type == ResourceType.ADDON:
        return MatchingData(**base, extended=True, applies_to_filter_info=filter_info)

    return MatchingData(
        **base,
        extended=True,
        provide_feature=wlp.provide_feature,
        version=asset.version,
        applies_to_filter_info=filter_info,
    )
