"""
Pydantic records for repository assets.

Every kind of artifact is held in one ``Asset`` record whose ``type`` field
says what it is. Kind specific attributes live in the ``wlp_information`` bag
and are only meaningful for the kinds that use them; the capability helpers at
the bottom of this module say which kinds those are.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import (
    AttachmentLinkType,
    AttachmentType,
    DisplayPolicy,
    ResourceType,
    Visibility,
)
from .state import State


class Provider(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None


class FilterVersion(BaseModel):
    """One bound of an applies-to version range, as stored on the asset."""

    value: Optional[str] = None
    inclusive: bool = True
    label: Optional[str] = None
    compatibility_label: Optional[str] = None


class AppliesToFilterInfo(BaseModel):
    """The products (and versions of them) a resource can be installed into."""

    product_id: Optional[str] = None
    min_version: Optional[FilterVersion] = None
    max_version: Optional[FilterVersion] = None
    editions: List[str] = Field(default_factory=list)
    raw_editions: List[str] = Field(default_factory=list)
    install_type: Optional[str] = None

    @property
    def has_max_version(self) -> bool:
        """False when the range is open ended, either ``V+`` or no version at all."""
        return self.max_version is not None


class WlpInformation(BaseModel):
    """Kind specific attributes of an asset."""

    applies_to: Optional[str] = None
    applies_to_filter_info: List[AppliesToFilterInfo] = Field(default_factory=list)
    provide_feature: Optional[str] = None
    short_name: Optional[str] = None
    visibility: Optional[Visibility] = None
    web_display_policy: Optional[DisplayPolicy] = None
    display_policy: Optional[DisplayPolicy] = None
    vanity_relative_url: Optional[str] = None
    require_feature: List[str] = Field(default_factory=list)
    # products
    product_id: Optional[str] = None
    product_edition: Optional[str] = None
    product_version: Optional[str] = None
    product_install_type: Optional[str] = None
    # admin scripts
    script_language: Optional[str] = None
    main_attachment_size: Optional[int] = None


class Attachment(BaseModel):
    """
    A file belonging to an asset.

    ``content`` holds the bytes to upload. It is never serialized; once stored
    the bytes are read back through the client.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: Optional[str] = None
    name: str
    type: AttachmentType = AttachmentType.CONTENT
    locale: Optional[str] = None
    crc: Optional[int] = None
    size: Optional[int] = None
    link_type: Optional[AttachmentLinkType] = None
    url: Optional[str] = None
    content: Optional[bytes] = Field(default=None, exclude=True, repr=False)

    def equivalent(self, other: Optional["Attachment"]) -> bool:
        """Same file as far as the repository is concerned, ignoring ids."""
        if other is None:
            return False
        mine = self.model_dump(exclude={"id", "url", "content"})
        theirs = other.model_dump(exclude={"id", "url", "content"})
        if mine != theirs:
            return False
        # Stored attachments get a server assigned url, linked ones keep theirs
        if self.link_type is not None:
            return self.url == other.url
        return True


class Asset(BaseModel):
    """An artifact record as held by a repository."""

    model_config = ConfigDict(validate_assignment=True)

    id: Optional[str] = None
    type: Optional[ResourceType] = None
    name: Optional[str] = None
    provider: Optional[Provider] = None
    version: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    license_id: Optional[str] = None
    state: State = State.DRAFT
    wlp_information: WlpInformation = Field(default_factory=WlpInformation)
    attachments: List[Attachment] = Field(default_factory=list)

    @property
    def provider_name(self) -> Optional[str]:
        return self.provider.name if self.provider else None

    def equivalent_without_attachments(self, other: Optional["Asset"]) -> bool:
        """True when both records describe the same content, ignoring ids,
        lifecycle state and attachments."""
        if other is None:
            return False
        exclude = {"id", "state", "attachments"}
        return self.model_dump(exclude=exclude) == other.model_dump(exclude=exclude)

    def get_attachment(self, name: str) -> Optional[Attachment]:
        for attachment in self.attachments:
            if attachment.name == name:
                return attachment
        return None

    @property
    def main_attachment(self) -> Optional[Attachment]:
        for attachment in self.attachments:
            if attachment.type == AttachmentType.CONTENT:
                return attachment
        return None


# Capabilities, by resource kind

WEB_DISPLAYABLE_TYPES = frozenset(
    {
        ResourceType.FEATURE,
        ResourceType.INSTALL,
        ResourceType.ADDON,
        ResourceType.TOOL,
        ResourceType.IFIX,
    }
)

APPLICABLE_TO_PRODUCT_TYPES = frozenset(
    {
        ResourceType.FEATURE,
        ResourceType.IFIX,
        ResourceType.ADMINSCRIPT,
        ResourceType.CONFIGSNIPPET,
        ResourceType.PRODUCTSAMPLE,
        ResourceType.OPENSOURCE,
    }
)

PRODUCT_TYPES = frozenset({ResourceType.INSTALL, ResourceType.ADDON})


def is_web_displayable(asset: Asset) -> bool:
    """Whether the website shows this kind of resource at all."""
    return asset.type in WEB_DISPLAYABLE_TYPES


def is_applicable_to_product(asset: Asset) -> bool:
    """Whether this kind of resource declares an applies-to header."""
    return asset.type in APPLICABLE_TO_PRODUCT_TYPES


def is_product(asset: Asset) -> bool:
    return asset.type in PRODUCT_TYPES


def is_visible_and_web_displayable(asset: Asset) -> bool:
    """True if the resource will be visible on the website. No policy means visible."""
    if not is_web_displayable(asset):
        return False
    policy = asset.wlp_information.web_display_policy
    return policy is None or policy == DisplayPolicy.VISIBLE


class ProductDefinition(BaseModel):
    """An installed product a resource may or may not apply to."""

    id: str
    version: Optional[str] = None
    install_type: Optional[str] = None
    edition: Optional[str] = None
    license_type: Optional[str] = None
