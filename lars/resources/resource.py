"""
Repository resources.

A RepositoryResource binds one Asset record to the connection it lives in (or
will be uploaded to) and carries every operation on it: adding and updating
the record, attachments, lifecycle actions, generated fields and matching
against existing resources.
"""

import logging
import re
import threading
import zlib
from contextlib import contextmanager
from typing import TYPE_CHECKING, List, Optional

from lars.model.asset import (
    AppliesToFilterInfo,
    Asset,
    Attachment,
    ProductDefinition,
    Provider,
)
from lars.model.enums import (
    AttachmentLinkType,
    AttachmentType,
    MatchResult,
    ResourceType,
    UpdateType,
)
from lars.model.matching import MatchingData, create_matching_data
from lars.model.state import MAX_TRANSITIONS, State, StateAction
from lars.remote.exception import AssetNotFound, ClientException, RequestFailure
from lars.resources.exceptions import (
    RepositoryBackendError,
    RepositoryBackendRequestFailure,
    RepositoryBadDataError,
    RepositoryResourceCreationError,
    RepositoryResourceDeletionError,
    RepositoryResourceLifecycleError,
    RepositoryResourceUpdateError,
    RepositoryResourceValidationError,
    backend_errors,
)
from lars.versioning.applies_to import parse_applies_to, validate_editions
from lars.versioning.exceptions import (
    AppliesToFormatError,
    BadVersionError,
    UnknownEditionError,
)
from lars.versioning.version import parse_version4

if TYPE_CHECKING:
    from lars.remote.connection import RepositoryConnection
    from lars.strategies.base import UploadStrategy

logger = logging.getLogger(__name__)

_VANITY_ILLEGAL = re.compile(r"[^A-Za-z0-9._-]")


def _vanity_name(asset: Asset) -> Optional[str]:
    if asset.type == ResourceType.FEATURE:
        return asset.wlp_information.provide_feature
    if asset.type in (ResourceType.INSTALL, ResourceType.ADDON):
        main = asset.main_attachment
        if main is not None and main.name:
            # Drop the trailing -<version> from the file name
            return main.name.rsplit("-", 1)[0]
    return asset.name


def _vanity_version(asset: Asset) -> Optional[str]:
    wlp = asset.wlp_information
    if asset.type == ResourceType.ADMINSCRIPT:
        return wlp.script_language
    if asset.type == ResourceType.INSTALL:
        if not wlp.product_version:
            return None
        filter_info = parse_applies_to(_product_applies_to(asset))
    elif asset.type == ResourceType.ADDON:
        filter_info = wlp.applies_to_filter_info
    else:
        return None
    if filter_info and filter_info[0].min_version is not None:
        return filter_info[0].min_version.label
    return None


def create_vanity_url(asset: Asset) -> Optional[str]:
    """
    Build the vanity URL of an asset: ``<type segment>[-<version>]-<name>``.

    Spaces become underscores and any other character outside
    ``[A-Za-z0-9._-]`` is dropped. Returns None for an asset with no type.
    """
    if asset.type is None:
        return None
    raw = asset.type.url_segment
    version = _vanity_version(asset)
    if version:
        raw += f"-{version}"
    raw += f"-{_vanity_name(asset) or ''}"
    return _VANITY_ILLEGAL.sub("", raw.replace(" ", "_"))


def _product_applies_to(asset: Asset) -> str:
    """Applies-to header describing an install product itself."""
    wlp = asset.wlp_information
    header = str(wlp.product_id)
    if wlp.product_edition:
        header += f"; productEdition={wlp.product_edition}"
    if wlp.product_version:
        header += f"; productVersion={wlp.product_version}"
    if wlp.product_install_type:
        header += f"; productInstallType={wlp.product_install_type}"
    return header


def _includes(info: AppliesToFilterInfo, version: str) -> bool:
    checked = parse_version4(version)
    if info.min_version is not None and info.min_version.value:
        if checked < parse_version4(info.min_version.value):
            return False
    if info.max_version is not None and info.max_version.value:
        if checked > parse_version4(info.max_version.value):
            return False
    return True


class RepositoryResource:
    """
    An asset together with the repository connection it belongs to.

    Resources built locally have no id until they are uploaded. Attachments
    added locally carry their bytes until they are stored.
    """

    def __init__(
        self,
        connection: "RepositoryConnection",
        asset: Optional[Asset] = None,
        **fields,
    ):
        """
        Args:
            connection: The repository the resource lives in or is uploaded to
            asset: An existing record; otherwise one is built from ``fields``
            fields: Asset fields, e.g. type=ResourceType.FEATURE, name="..."
        """
        self.connection = connection
        if asset is None:
            provider = fields.pop("provider", None)
            if isinstance(provider, str):
                provider = Provider(name=provider)
            asset = Asset(provider=provider, **fields)
        self._asset = asset
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"RepositoryResource(id={self.id!r}, type={self.type}, name={self.name!r})"

    # Fields

    @property
    def asset(self) -> Asset:
        return self._asset

    @property
    def id(self) -> Optional[str]:
        return self._asset.id

    @property
    def name(self) -> Optional[str]:
        return self._asset.name

    @property
    def type(self) -> Optional[ResourceType]:
        return self._asset.type

    @property
    def state(self) -> State:
        return self._asset.state

    @property
    def wlp(self):
        return self._asset.wlp_information

    @property
    def vanity_url(self) -> Optional[str]:
        """The stored vanity URL, or the one this resource would generate."""
        return self.wlp.vanity_relative_url or create_vanity_url(self._asset)

    @property
    def attachments(self) -> List[Attachment]:
        return self._asset.attachments

    @property
    def main_attachment(self) -> Optional[Attachment]:
        return self._asset.main_attachment

    @property
    def client(self):
        return self.connection.client

    # Error translation

    @contextmanager
    def _client_call(self, message: str, error_class=None):
        """
        Translate client exceptions into repository errors.

        With ``error_class`` every failure becomes that resource error;
        either way the error carries the connection.
        """
        if error_class is None:
            with backend_errors(self.connection, message):
                yield
            return
        try:
            yield
        except ClientException as e:
            raise error_class(
                f"{message}: {e}", self.id, e, connection=self.connection
            ) from e

    # Attachments

    def add_attachment(
        self,
        name: str,
        content: Optional[bytes] = None,
        type: AttachmentType = AttachmentType.CONTENT,
        locale: Optional[str] = None,
        url: Optional[str] = None,
        link_type: Optional[AttachmentLinkType] = None,
    ) -> Attachment:
        """
        Attach a file to this resource locally. It is stored on upload.

        ``content`` holds the bytes to store. Linked attachments give a
        ``link_type`` and ``url`` instead and are never stored.
        """
        attachment = Attachment(
            name=name,
            type=type,
            locale=locale,
            url=url,
            link_type=link_type,
            content=content,
            crc=zlib.crc32(content) if content is not None else None,
            size=len(content) if content is not None else None,
        )
        # Replace an attachment of the same name
        self._asset.attachments = [
            a for a in self._asset.attachments if a.name != name
        ] + [attachment]
        if type == AttachmentType.CONTENT and content is not None:
            self.wlp.main_attachment_size = len(content)
        return attachment

    def add_content(self, name: str, content: bytes) -> Attachment:
        return self.add_attachment(name, content, AttachmentType.CONTENT)

    def get_attachment_content(self, attachment: Attachment) -> bytes:
        """The bytes of an attachment, read from the repository when not held locally."""
        if attachment.content is not None:
            return attachment.content
        with self._client_call(f"Failed to read attachment {attachment.name}"):
            return self.client.get_attachment(self.id, attachment.id)

    def copy_attachments(self) -> None:
        """
        Prepare the attachments of an uploaded resource to be stored again.

        Stored attachment bytes are downloaded (with one retry) and ids are
        reset, so a re-upload stores fresh copies. Linked attachments keep
        their URL.

        Raises:
            RepositoryResourceUpdateError: If an attachment cannot be downloaded
        """
        for attachment in self._asset.attachments:
            if attachment.link_type is None and attachment.url is not None:
                try:
                    try:
                        content = self.get_attachment_content(attachment)
                    except RepositoryBackendError:
                        logger.debug(f"Retrying download of attachment {attachment.name}")
                        content = self.get_attachment_content(attachment)
                except RepositoryBackendError as e:
                    raise RepositoryResourceUpdateError(
                        f"Exception caught while obtaining attachments for resource {self.name}",
                        self.id,
                        e,
                    ) from e
                attachment.content = content
                attachment.url = None
            attachment.id = None

    def attachment_update_required(
        self, attachment: Attachment, remote: Optional["RepositoryResource"]
    ) -> UpdateType:
        """Whether ``attachment`` differs from the same named attachment of ``remote``."""
        if remote is None:
            return UpdateType.ADD
        for remote_attachment in remote.attachments:
            if remote_attachment.name == attachment.name:
                if attachment.equivalent(remote_attachment):
                    return UpdateType.NOTHING
                return UpdateType.UPDATE
        return UpdateType.ADD

    # Backend operations

    def add_asset(self) -> None:
        """
        Create the asset record in the repository, without attachments.

        The backend assigns the id and the DRAFT state. Local attachments are
        kept and stored by add_attachments.
        """
        pending = self._asset.attachments
        with self._client_call(
            f"Failed to add resource {self.name}", RepositoryResourceCreationError
        ):
            stored = self.client.add_asset(self._asset)
        stored.attachments = pending
        self._asset = stored
        logger.debug(f"Added asset {self.id} for {self.name}")

    def add_attachments(self) -> None:
        """Store every local attachment. Only valid once the asset has an id."""
        if self.id is None:
            raise RepositoryResourceValidationError(
                f"Cannot add attachments to {self.name} before it has been uploaded"
            )
        stored = []
        for attachment in self._asset.attachments:
            with self._client_call(
                f"Failed to add attachment {attachment.name}",
                RepositoryResourceCreationError,
            ):
                stored.append(
                    self.client.add_attachment(self.id, attachment, attachment.content)
                )
        self._asset.attachments = stored

    def update_asset(self) -> None:
        with self._client_call(
            f"Failed to update resource {self.name}", RepositoryResourceUpdateError
        ):
            self._asset = self.client.update_asset(self._asset)

    def delete(self) -> None:
        """Delete the asset and all its attachments."""
        with self._client_call("Failed to delete resource", RepositoryResourceDeletionError):
            self.client.delete_asset_and_attachments(self.id)

    def refresh(self) -> None:
        """Re-read the asset, and any fields the backend set, from the repository."""
        with self._client_call(f"Failed to read resource {self.id}"):
            self._asset = self.client.get_asset(self.id)

    def copy_fields_from(self, other: "RepositoryResource") -> None:
        """Take every field of ``other`` except the id, state and attachments."""
        merged = other.asset.model_copy(deep=True)
        merged.id = self._asset.id
        merged.state = self._asset.state
        merged.attachments = self._asset.attachments
        self._asset = merged

    def overwrite_asset_data(self, target: "RepositoryResource") -> None:
        """
        Merge this resource's fields onto ``target`` and adopt the result.

        Afterwards this resource has the target's id, state and attachments.
        """
        target.copy_fields_from(self)
        self._asset = target.asset

    def adopt(self, other: "RepositoryResource") -> None:
        """Use the stored record of an equivalent resource as this one."""
        self._asset = other.asset.model_copy(deep=True)

    # Lifecycle

    def perform_action(self, action: StateAction) -> None:
        """
        Apply one lifecycle action and re-read the resource.

        Raises:
            RepositoryResourceLifecycleError: If the current state does not allow ``action``
        """
        current = self.state
        if not current.is_state_action_allowed(action):
            raise RepositoryResourceLifecycleError(
                f"Action {action.value if action else None} is not allowed "
                f"for resource {self.id} in state {current.value}",
                self.id,
                current,
                action,
            )
        try:
            self.client.update_state(self.id, action)
        except AssetNotFound as e:
            raise RepositoryBackendRequestFailure(e, self.connection) from e
        except RequestFailure as e:
            raise RepositoryResourceLifecycleError(
                f"Repository refused action {action.value} on resource {self.id}: {e}",
                self.id,
                current,
                action,
                e,
            ) from e
        except ClientException as e:
            raise RepositoryBackendError(
                f"Failed to {action.value} resource {self.id}", self.connection, e
            ) from e
        logger.debug(f"Resource {self.id}: {current.value} -> {action.value}")
        self.refresh()

    def publish(self) -> None:
        self.perform_action(StateAction.PUBLISH)

    def approve(self) -> None:
        self.perform_action(StateAction.APPROVE)

    def cancel(self) -> None:
        self.perform_action(StateAction.CANCEL)

    def need_more_info(self) -> None:
        self.perform_action(StateAction.NEED_MORE_INFO)

    def unpublish(self) -> None:
        self.perform_action(StateAction.UNPUBLISH)

    def move_to_state(self, target: State) -> None:
        """
        Walk the transition table one action at a time until ``target`` is reached.

        Raises:
            RepositoryResourceLifecycleError: If no action leads towards
                ``target`` or it is not reached within MAX_TRANSITIONS actions
        """
        hops = 0
        while self.state != target:
            action = self.state.get_next_action(target)
            if action is None or hops >= MAX_TRANSITIONS:
                raise RepositoryResourceLifecycleError(
                    f"Unable to move to state {target.value} after {hops} state "
                    f"transition attempts. Resource left in state {self.state.value}",
                    self.id,
                    self.state,
                    action,
                )
            self.perform_action(action)
            hops += 1

    # Generated fields and matching

    def update_generated_fields(self, perform_edition_checking: bool = True) -> None:
        """
        Recalculate the applies-to filter info and the vanity URL.

        Raises:
            RepositoryResourceValidationError: If the applies-to header is malformed
            RepositoryResourceCreationError: If edition checking meets an unknown edition
        """
        wlp = self.wlp
        try:
            if self.type == ResourceType.INSTALL:
                wlp.applies_to_filter_info = parse_applies_to(
                    _product_applies_to(self._asset)
                )
            elif wlp.applies_to is not None:
                wlp.applies_to_filter_info = parse_applies_to(wlp.applies_to)
            if perform_edition_checking:
                validate_editions(wlp.applies_to_filter_info)
        except AppliesToFormatError as e:
            raise RepositoryResourceValidationError(str(e), self.id, e) from e
        except UnknownEditionError as e:
            raise RepositoryResourceCreationError(str(e), self.id, e) from e
        wlp.vanity_relative_url = create_vanity_url(self._asset)

    def equivalent_without_attachments(self, other: Optional["RepositoryResource"]) -> bool:
        return other is not None and self._asset.equivalent_without_attachments(other.asset)

    def update_required(self, matching: Optional["RepositoryResource"]) -> UpdateType:
        """ADD when there is no match, NOTHING when the match is equivalent, else UPDATE."""
        if matching is None:
            return UpdateType.ADD
        if self.equivalent_without_attachments(matching):
            return UpdateType.NOTHING
        return UpdateType.UPDATE

    def create_matching_data(self) -> MatchingData:
        return create_matching_data(self._asset)

    def find_matching_resources(self) -> List["RepositoryResource"]:
        """
        Find existing resources with the same identity as this one.

        Raises:
            RepositoryResourceValidationError: If this resource has no provider
            RepositoryBackendError: If the repository cannot be read
        """
        if self._asset.provider is None:
            raise RepositoryResourceValidationError(
                "No provider specified for the supplied resource", self.id
            )
        key = self.create_matching_data()
        with self._client_call("Failed to find matching resources"):
            candidates = self.client.get_assets(self.type)

        matching = []
        for asset in candidates:
            try:
                if create_matching_data(asset) == key:
                    matching.append(RepositoryResource(self.connection, asset))
            except AppliesToFormatError as e:
                logger.warning(f"Skipping resource {asset.id} while matching: {e}")

        if len(matching) > 1:
            lines = "".join(f"\n\t{r.name} ({r.id})" for r in matching)
            logger.warning(f"More than one match found for {self.name}:{lines}")
        return matching

    def matches(self, definition: ProductDefinition) -> MatchResult:
        """
        Check whether this resource applies to an installed product.

        Raises:
            RepositoryBadDataError: If a version in the filter info or definition is malformed
        """
        filter_info = self.wlp.applies_to_filter_info
        if not filter_info:
            return MatchResult.NOT_APPLICABLE
        for info in filter_info:
            if info.product_id != definition.id:
                continue
            if definition.version:
                try:
                    if not _includes(info, definition.version):
                        return MatchResult.INVALID_VERSION
                except BadVersionError as e:
                    raise RepositoryBadDataError(
                        "Bad version while matching product definition", self.id, e
                    ) from e
            if info.raw_editions and definition.edition not in info.raw_editions:
                return MatchResult.INVALID_EDITION
            if info.install_type is not None and info.install_type != definition.install_type:
                return MatchResult.INVALID_INSTALL_TYPE
            return MatchResult.MATCHED
        return MatchResult.NOT_APPLICABLE

    # Upload

    def upload(self, strategy: "UploadStrategy") -> None:
        """
        Upload this resource using ``strategy``.

        Generated fields are recalculated first. A resource that was already
        uploaded has its stored attachments copied so they are stored again.

        Raises:
            RepositoryError: Whatever the strategy or the backend raises
        """
        with self._lock:
            self.update_generated_fields(strategy.perform_edition_checking())
            if self.id is not None:
                self.copy_attachments()
            matching = strategy.find_matching_resources(self)
            strategy.upload_asset(self, matching)
