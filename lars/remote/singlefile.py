"""
Repository stored in a single JSON file.

The file holds a JSON array of asset records. Attachment bytes live beside it
in ``<file>.attachments/<asset id>/<attachment id>``. Every access takes an
fcntl lock on ``<file>.lock`` so several processes can share one repository.
"""

import fcntl
import json
import logging
import os
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Union

from pydantic import ValidationError

from lars.model.asset import Asset
from lars.remote.client import RecordStoreClient
from lars.remote.exception import (
    AssetNotFound,
    RepositoryIOError,
    RepositoryLockError,
    RepositoryNotADirectory,
    RepositoryNotFound,
)

logger = logging.getLogger(__name__)


class SingleFileWriteClient(RecordStoreClient):
    def __init__(self, path: Union[str, Path], lock_timeout: float = 30.0):
        """
        Args:
            path: The repository JSON file
            lock_timeout: Maximum time to wait for the repository lock (seconds)
        """
        self.path = Path(path)
        self.location = str(self.path)
        self.attachment_dir = self.path.with_name(self.path.name + ".attachments")
        self.lock_file = self.path.with_name(self.path.name + ".lock")
        self.lock_timeout = lock_timeout

    @classmethod
    def create_empty_repository(cls, path: Union[str, Path]) -> "SingleFileWriteClient":
        """
        Create a new, empty repository file.

        Raises:
            RepositoryIOError: If the file already exists or cannot be written
        """
        path = Path(path)
        if path.exists():
            raise RepositoryIOError(path, "file already exists")
        client = cls(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with client.acquire_lock():
                client._save({})
                client.attachment_dir.mkdir(exist_ok=True)
        except OSError as e:
            raise RepositoryIOError(path, str(e))
        logger.info(f"Created empty repository at {path}")
        return client

    def check_status(self) -> None:
        if not self.path.exists():
            raise RepositoryNotFound(self.location)
        if self.attachment_dir.exists() and not self.attachment_dir.is_dir():
            raise RepositoryNotADirectory(self.attachment_dir)
        with self.acquire_lock(shared=True):
            self._load()

    @contextmanager
    def acquire_lock(self, shared: bool = False):
        """
        Acquire the repository file lock.

        Args:
            shared: If True, acquire a shared (read) lock. If False, exclusive (write) lock.

        Raises:
            RepositoryLockError: If the lock cannot be acquired within the timeout
        """
        lock_handle = None
        start_time = time.time()

        try:
            lock_handle = open(self.lock_file, "a+")
            lock_type = fcntl.LOCK_SH if shared else fcntl.LOCK_EX

            while True:
                try:
                    fcntl.flock(lock_handle, lock_type | fcntl.LOCK_NB)
                    break
                except IOError:
                    if time.time() - start_time > self.lock_timeout:
                        raise RepositoryLockError(str(self.lock_file), self.lock_timeout)
                    time.sleep(0.1)

            yield lock_handle

        finally:
            if lock_handle:
                try:
                    fcntl.flock(lock_handle, fcntl.LOCK_UN)
                except OSError:
                    pass
                lock_handle.close()

    def _load(self) -> Dict[str, Asset]:
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise RepositoryNotFound(self.location)
        except (OSError, json.JSONDecodeError) as e:
            raise RepositoryIOError(self.location, str(e))

        if not isinstance(data, list):
            raise RepositoryIOError(self.location, "expected a JSON array of assets")
        try:
            assets = [Asset.model_validate(item) for item in data]
        except ValidationError as e:
            raise RepositoryIOError(self.location, f"invalid asset record: {e}")
        return {asset.id: asset for asset in assets}

    def _save(self, records: Dict[str, Asset]) -> None:
        data = [asset.model_dump(mode="json") for asset in records.values()]
        # Write to a temporary file first so readers never see a partial file
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise RepositoryIOError(self.location, str(e))

    @contextmanager
    def _records(self, write: bool = False) -> Iterator[Dict[str, Asset]]:
        with self.acquire_lock(shared=not write):
            records = self._load()
            yield records
            if write:
                self._save(records)

    def _content_path(self, asset_id: str, attachment_id: str) -> Path:
        return self.attachment_dir / asset_id / attachment_id

    def _read_content(self, asset_id: str, attachment_id: str) -> bytes:
        try:
            return self._content_path(asset_id, attachment_id).read_bytes()
        except FileNotFoundError:
            raise AssetNotFound(asset_id, attachment_id)
        except OSError as e:
            raise RepositoryIOError(self.location, str(e))

    def _write_content(self, asset_id: str, attachment_id: str, content: bytes) -> None:
        target = self._content_path(asset_id, attachment_id)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except NotADirectoryError:
            raise RepositoryNotADirectory(self.attachment_dir)
        except OSError as e:
            raise RepositoryIOError(self.location, str(e))

    def _delete_content(self, asset_id: str, attachment_id: str) -> None:
        target = self._content_path(asset_id, attachment_id)
        target.unlink(missing_ok=True)
        if target.parent.is_dir() and not any(target.parent.iterdir()):
            target.parent.rmdir()
