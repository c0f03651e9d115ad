"""Pydantic models and enums for repository assets."""

from lars.model.enums import (
    AttachmentLinkType,
    AttachmentType,
    DisplayPolicy,
    MatchResult,
    ResourceType,
    UpdateType,
    Visibility,
)
from lars.model.state import (
    IllegalTransitionError,
    State,
    StateAction,
    plan_transitions,
)
from lars.model.asset import (
    AppliesToFilterInfo,
    Asset,
    Attachment,
    FilterVersion,
    ProductDefinition,
    Provider,
    WlpInformation,
    is_applicable_to_product,
    is_product,
    is_visible_and_web_displayable,
    is_web_displayable,
)

# lars.model.matching depends on lars.versioning and is imported directly
