"""
Resource descriptors: YAML (or JSON) files describing a resource to upload.

Example:

    type: feature
    name: JSON Processing
    provider: IBM
    version: 1.0.0
    wlp_information:
      provide_feature: com.ibm.websphere.appserver.jsonp-1.0
      applies_to: com.ibm.websphere.appserver; productVersion=8.5.5.9+
      web_display_policy: VISIBLE
    attachments:
      - path: jsonp-1.0.esa
      - name: Documentation
        type: documentation
        url: https://example.com/jsonp
        link_type: WEB_PAGE

Attachment paths are relative to the descriptor.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lars.model.asset import WlpInformation
from lars.model.enums import AttachmentLinkType, AttachmentType, ResourceType


class DescriptorError(Exception):
    """Raised when a resource descriptor cannot be read."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class AttachmentDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: Optional[str] = None
    name: Optional[str] = None
    type: AttachmentType = AttachmentType.CONTENT
    locale: Optional[str] = None
    url: Optional[str] = None
    link_type: Optional[AttachmentLinkType] = None


class ResourceDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: ResourceType
    name: str
    provider: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    license_id: Optional[str] = None
    wlp_information: WlpInformation = Field(default_factory=WlpInformation)
    attachments: List[AttachmentDescriptor] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _resource_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return ResourceType.from_name(value)
        return value

    def asset_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"attachments"})


def load_descriptor(path: Path) -> ResourceDescriptor:
    """
    Read a resource descriptor.

    Raises:
        DescriptorError: If the file cannot be read or does not describe a resource
    """
    try:
        with open(path, "r") as f:
            # JSON is a subset of YAML
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise DescriptorError(path, str(e)) from e

    if not isinstance(data, dict):
        raise DescriptorError(path, "expected a mapping of resource fields")
    try:
        return ResourceDescriptor.model_validate(data)
    except ValidationError as e:
        raise DescriptorError(path, str(e)) from e


def build_resource(connection, path: Path):
    """
    Build the RepositoryResource a descriptor describes, with its attachments.

    Raises:
        DescriptorError: If the descriptor or an attachment file cannot be read
    """
    from lars.resources.resource import RepositoryResource

    path = Path(path)
    descriptor = load_descriptor(path)
    resource = RepositoryResource(connection, **descriptor.asset_fields())

    for attachment in descriptor.attachments:
        content = None
        name = attachment.name
        if attachment.path is not None:
            file_path = path.parent / attachment.path
            try:
                content = file_path.read_bytes()
            except OSError as e:
                raise DescriptorError(path, f"cannot read attachment {file_path}: {e}") from e
            name = name or file_path.name
        if name is None:
            raise DescriptorError(path, "an attachment needs a name or a path")
        resource.add_attachment(
            name,
            content,
            type=attachment.type,
            locale=attachment.locale,
            url=attachment.url,
            link_type=attachment.link_type,
        )
    return resource
