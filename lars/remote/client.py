"""Abstract repository clients."""

import logging
import uuid
from abc import ABCMeta, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from lars.model.asset import Asset, Attachment
from lars.model.enums import ResourceType
from lars.model.state import State, StateAction
from lars.remote.exception import AssetNotFound, RequestFailure

logger = logging.getLogger(__name__)


class ReadClient(metaclass=ABCMeta):
    """
    Read access to a repository.

    Methods:
    - check_status(): Fails if the repository cannot be used.
    - get_all_assets(): Every asset, attachments included.
    - get_assets(type): Every asset of one resource type.
    - get_asset(asset_id): One asset.
    - get_attachment(asset_id, attachment_id): The stored bytes of an attachment.
    """

    @abstractmethod
    def check_status(self) -> None:
        """
        Check the repository is reachable and well formed.

        Raises:
            AssetNotFound, RepositoryNotADirectory, RepositoryIOError
        """
        raise NotImplementedError

    @abstractmethod
    def get_all_assets(self) -> List[Asset]:
        raise NotImplementedError

    def get_assets(self, type: ResourceType) -> List[Asset]:
        return [asset for asset in self.get_all_assets() if asset.type == type]

    @abstractmethod
    def get_asset(self, asset_id: str) -> Asset:
        """
        Raises:
            AssetNotFound: If there is no asset with this id
        """
        raise NotImplementedError

    @abstractmethod
    def get_attachment(self, asset_id: str, attachment_id: str) -> bytes:
        raise NotImplementedError


class WriteClient(ReadClient):
    """
    Read and write access to a repository.

    The backend owns asset ids, attachment ids and lifecycle state: new assets
    always start in DRAFT and state only changes through update_state.
    """

    @abstractmethod
    def add_asset(self, asset: Asset) -> Asset:
        """Store a new asset without its attachments and return the stored record."""
        raise NotImplementedError

    @abstractmethod
    def update_asset(self, asset: Asset) -> Asset:
        """
        Overwrite the metadata of an existing asset. Attachments and state are kept.

        Raises:
            AssetNotFound: If the asset does not exist
            RequestFailure: If the asset is published
        """
        raise NotImplementedError

    @abstractmethod
    def delete_asset(self, asset_id: str) -> None:
        raise NotImplementedError

    def delete_asset_and_attachments(self, asset_id: str) -> None:
        asset = self.get_asset(asset_id)
        for attachment in asset.attachments:
            self.delete_attachment(asset_id, attachment.id)
        self.delete_asset(asset_id)

    @abstractmethod
    def add_attachment(
        self, asset_id: str, attachment: Attachment, content: Optional[bytes]
    ) -> Attachment:
        """
        Add an attachment to an asset.

        ``content`` is None for linked attachments, which keep their own URL.
        """
        raise NotImplementedError

    @abstractmethod
    def delete_attachment(self, asset_id: str, attachment_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def update_state(self, asset_id: str, action: StateAction) -> Asset:
        """
        Apply one lifecycle action.

        Raises:
            RequestFailure: If the asset's current state does not allow the action
        """
        raise NotImplementedError


class RecordStoreClient(WriteClient):
    """
    A WriteClient over a dict of asset records.

    Subclasses provide ``_records()``, a context manager yielding the records
    keyed by id (changes made inside it are kept), and storage for attachment
    bytes.
    """

    location: Optional[str] = None

    @abstractmethod
    @contextmanager
    def _records(self, write: bool = False) -> Iterator[Dict[str, Asset]]:
        raise NotImplementedError

    @abstractmethod
    def _read_content(self, asset_id: str, attachment_id: str) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def _write_content(self, asset_id: str, attachment_id: str, content: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    def _delete_content(self, asset_id: str, attachment_id: str) -> None:
        raise NotImplementedError

    @staticmethod
    def _lookup(records: Dict[str, Asset], asset_id: Optional[str]) -> Asset:
        if asset_id is None or asset_id not in records:
            raise AssetNotFound(asset_id)
        return records[asset_id]

    def _attachment_url(self, asset_id: str, attachment_id: str) -> str:
        return f"{self.location or 'memory'}/assets/{asset_id}/attachments/{attachment_id}"

    def get_all_assets(self) -> List[Asset]:
        with self._records() as records:
            return [asset.model_copy(deep=True) for asset in records.values()]

    def get_asset(self, asset_id: str) -> Asset:
        with self._records() as records:
            return self._lookup(records, asset_id).model_copy(deep=True)

    def get_attachment(self, asset_id: str, attachment_id: str) -> bytes:
        with self._records() as records:
            asset = self._lookup(records, asset_id)
            if not any(a.id == attachment_id for a in asset.attachments):
                raise AssetNotFound(asset_id, attachment_id)
        return self._read_content(asset_id, attachment_id)

    def add_asset(self, asset: Asset) -> Asset:
        stored = asset.model_copy(deep=True)
        stored.id = uuid.uuid4().hex
        stored.state = State.DRAFT
        stored.attachments = []
        with self._records(write=True) as records:
            records[stored.id] = stored
        logger.debug(f"Added asset {stored.id} ({stored.name})")
        return stored.model_copy(deep=True)

    def update_asset(self, asset: Asset) -> Asset:
        with self._records(write=True) as records:
            existing = self._lookup(records, asset.id)
            if existing.state == State.PUBLISHED:
                raise RequestFailure(
                    409, f"Asset {asset.id} is published and cannot be updated", asset.id
                )
            updated = asset.model_copy(deep=True)
            updated.state = existing.state
            updated.attachments = existing.attachments
            records[asset.id] = updated
            return updated.model_copy(deep=True)

    def delete_asset(self, asset_id: str) -> None:
        with self._records(write=True) as records:
            self._lookup(records, asset_id)
            del records[asset_id]
        logger.debug(f"Deleted asset {asset_id}")

    def add_attachment(
        self, asset_id: str, attachment: Attachment, content: Optional[bytes]
    ) -> Attachment:
        stored = attachment.model_copy(deep=True)
        stored.id = uuid.uuid4().hex
        stored.content = None
        if content is not None:
            stored.size = len(content)
            stored.url = self._attachment_url(asset_id, stored.id)
        with self._records(write=True) as records:
            asset = self._lookup(records, asset_id)
            if content is not None:
                self._write_content(asset_id, stored.id, content)
            asset.attachments.append(stored)
        return stored.model_copy(deep=True)

    def delete_attachment(self, asset_id: str, attachment_id: str) -> None:
        with self._records(write=True) as records:
            asset = self._lookup(records, asset_id)
            remaining = [a for a in asset.attachments if a.id != attachment_id]
            if len(remaining) == len(asset.attachments):
                raise AssetNotFound(asset_id, attachment_id)
            asset.attachments = remaining
            self._delete_content(asset_id, attachment_id)

    def update_state(self, asset_id: str, action: StateAction) -> Asset:
        with self._records(write=True) as records:
            asset = self._lookup(records, asset_id)
            next_state = action.resulting_state(asset.state)
            if next_state is None:
                raise RequestFailure(
                    400,
                    f"Action {action.value} is not allowed for an asset in state "
                    f"{asset.state.value}",
                    asset_id,
                )
            asset.state = next_state
            return asset.model_copy(deep=True)
