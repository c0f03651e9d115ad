import json

import pytest

from lars.model.asset import Asset, Attachment
from lars.model.enums import ResourceType
from lars.model.state import StateAction
from lars.remote.exception import (
    AssetNotFound,
    RepositoryIOError,
    RepositoryNotADirectory,
    RepositoryNotFound,
)
from lars.remote.singlefile import SingleFileWriteClient


@pytest.fixture
def repository(tmp_path):
    return SingleFileWriteClient.create_empty_repository(tmp_path / "repo.json")


@pytest.mark.short
class TestSingleFileWriteClient:
    def test_create_empty_repository(self, tmp_path, repository):
        path = tmp_path / "repo.json"
        assert json.loads(path.read_text()) == []
        assert repository.attachment_dir.is_dir()
        repository.check_status()

    def test_create_fails_when_file_exists(self, tmp_path, repository):
        with pytest.raises(RepositoryIOError):
            SingleFileWriteClient.create_empty_repository(tmp_path / "repo.json")

    def test_missing_repository(self, tmp_path):
        client = SingleFileWriteClient(tmp_path / "missing.json")
        with pytest.raises(RepositoryNotFound):
            client.check_status()
        with pytest.raises(RepositoryNotFound):
            client.get_all_assets()

    def test_attachment_store_not_a_directory(self, tmp_path):
        path = tmp_path / "repo.json"
        path.write_text("[]")
        (tmp_path / "repo.json.attachments").write_text("not a directory")
        with pytest.raises(RepositoryNotADirectory):
            SingleFileWriteClient(path).check_status()

    def test_corrupt_repository(self, tmp_path):
        path = tmp_path / "repo.json"
        path.write_text("{not json")
        with pytest.raises(RepositoryIOError):
            SingleFileWriteClient(path).check_status()

    def test_records_persist_across_clients(self, tmp_path, repository):
        stored = repository.add_asset(Asset(type=ResourceType.TOOL, name="tool"))
        attachment = repository.add_attachment(stored.id, Attachment(name="tool.zip"), b"zip")
        repository.update_state(stored.id, StateAction.PUBLISH)

        reopened = SingleFileWriteClient(tmp_path / "repo.json")
        asset = reopened.get_asset(stored.id)
        assert asset.name == "tool"
        assert asset.state.value == "awaiting_approval"
        assert reopened.get_attachment(stored.id, attachment.id) == b"zip"

    def test_delete_removes_content(self, repository):
        stored = repository.add_asset(Asset(type=ResourceType.TOOL, name="tool"))
        attachment = repository.add_attachment(stored.id, Attachment(name="tool.zip"), b"zip")
        content_dir = repository.attachment_dir / stored.id
        assert (content_dir / attachment.id).exists()

        repository.delete_asset_and_attachments(stored.id)
        assert not content_dir.exists()
        with pytest.raises(AssetNotFound):
            repository.get_asset(stored.id)

    def test_lock_file_is_released(self, repository):
        repository.add_asset(Asset(type=ResourceType.TOOL, name="tool"))
        with repository.acquire_lock():
            pass
        assert len(repository.get_all_assets()) == 1
