"""In-memory repository client, used by tests and for dry runs."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Tuple

from lars.model.asset import Asset
from lars.remote.client import RecordStoreClient
from lars.remote.exception import AssetNotFound


class MemoryWriteClient(RecordStoreClient):
    """
    A repository held in a dict.

    All access is serialized through one re-entrant lock. Records are deep
    copied on the way in and out, so callers never share state with the store.
    """

    location = None

    def __init__(self):
        self._lock = threading.RLock()
        self._assets: Dict[str, Asset] = {}
        self._content: Dict[Tuple[str, str], bytes] = {}

    def check_status(self) -> None:
        return None

    @contextmanager
    def _records(self, write: bool = False) -> Iterator[Dict[str, Asset]]:
        with self._lock:
            yield self._assets

    def _read_content(self, asset_id: str, attachment_id: str) -> bytes:
        with self._lock:
            try:
                return self._content[(asset_id, attachment_id)]
            except KeyError:
                raise AssetNotFound(asset_id, attachment_id)

    def _write_content(self, asset_id: str, attachment_id: str, content: bytes) -> None:
        with self._lock:
            self._content[(asset_id, attachment_id)] = bytes(content)

    def _delete_content(self, asset_id: str, attachment_id: str) -> None:
        with self._lock:
            self._content.pop((asset_id, attachment_id), None)
