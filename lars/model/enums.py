"""Enumerations shared by the repository model."""

from enum import Enum


class ResourceType(str, Enum):
    """
    The nine kinds of artifact stored in a repository.

    The enum value is the long type name stored on the asset record. Each kind
    also knows the segment used when building its vanity URL.
    """

    PRODUCTSAMPLE = "com.ibm.websphere.ProductSample"
    OPENSOURCE = "com.ibm.websphere.OpenSource"
    INSTALL = "com.ibm.websphere.Install"
    ADDON = "com.ibm.websphere.Addon"
    FEATURE = "com.ibm.websphere.Feature"
    IFIX = "com.ibm.websphere.Ifix"
    ADMINSCRIPT = "com.ibm.websphere.AdminScript"
    CONFIGSNIPPET = "com.ibm.websphere.ConfigSnippet"
    TOOL = "com.ibm.websphere.Tool"

    @property
    def url_segment(self) -> str:
        """Segment used as the prefix of vanity URLs for this type."""
        return _URL_SEGMENTS[self]

    @classmethod
    def from_name(cls, name: str) -> "ResourceType":
        """Look a type up by member name, long value or URL segment."""
        lowered = name.strip().lower()
        for member in cls:
            if lowered in (
                member.name.lower(),
                member.value.lower(),
                member.url_segment,
            ):
                return member
        raise ValueError(f"Unknown resource type: '{name}'")


_URL_SEGMENTS = {
    ResourceType.PRODUCTSAMPLE: "samples",
    ResourceType.OPENSOURCE: "opensource",
    ResourceType.INSTALL: "runtimes",
    ResourceType.ADDON: "addons",
    ResourceType.FEATURE: "features",
    ResourceType.IFIX: "ifixes",
    ResourceType.ADMINSCRIPT: "scripts",
    ResourceType.CONFIGSNIPPET: "snippets",
    ResourceType.TOOL: "tools",
}


class AttachmentType(str, Enum):
    """Role of an attachment within its resource."""

    CONTENT = "content"
    DOCUMENTATION = "documentation"
    THUMBNAIL = "thumbnail"
    ILLUSTRATION = "illustration"
    LICENSE = "license"
    LICENSE_AGREEMENT = "license_agreement"
    LICENSE_INFORMATION = "license_information"


class AttachmentLinkType(str, Enum):
    """How an attachment that is not stored in the repository is reached."""

    DIRECT = "DIRECT"
    WEB_PAGE = "WEB_PAGE"


class DisplayPolicy(str, Enum):
    VISIBLE = "VISIBLE"
    HIDDEN = "HIDDEN"


class Visibility(str, Enum):
    """Feature visibility as declared in the feature manifest."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    PROTECTED = "PROTECTED"
    INSTALL = "INSTALL"


class UpdateType(str, Enum):
    """Outcome of comparing a candidate with the resource it would replace."""

    ADD = "add"
    UPDATE = "update"
    NOTHING = "nothing"


class MatchResult(str, Enum):
    """Outcome of checking a resource against a product definition."""

    MATCHED = "matched"
    NOT_APPLICABLE = "not_applicable"
    INVALID_VERSION = "invalid_version"
    INVALID_EDITION = "invalid_edition"
    INVALID_INSTALL_TYPE = "invalid_install_type"
