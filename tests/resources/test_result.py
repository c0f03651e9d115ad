from unittest import mock

import pytest

from lars.model.state import State
from lars.resources.exceptions import (
    ErrorKind,
    RepositoryBadDataError,
    RepositoryResourceValidationError,
)
from lars.resources.result import upload_resource
from lars.strategies import AddNewStrategy, AddThenDeleteStrategy
from lars.versioning.exceptions import BadVersionError


@pytest.mark.short
class TestUploadResource:
    def test_success(self, make_feature, capture_logs):
        resource = make_feature()
        result = upload_resource(resource, AddNewStrategy())
        assert result.ok
        assert result.error is None
        assert result.kind is None
        assert result.resource is resource
        assert resource.state == State.DRAFT
        result.raise_for_error()
        assert f"as {resource.id}" in capture_logs.getvalue()

    def test_validation_failure(self, make_feature):
        result = upload_resource(make_feature(provider=None), AddThenDeleteStrategy())
        assert not result.ok
        assert result.kind == ErrorKind.VALIDATION
        assert isinstance(result.error, RepositoryResourceValidationError)
        with pytest.raises(RepositoryResourceValidationError):
            result.raise_for_error()

    def test_bad_version_is_reported_as_bad_data(self, make_feature):
        strategy = mock.MagicMock()
        strategy.perform_edition_checking.return_value = True
        strategy.find_matching_resources.return_value = []
        strategy.upload_asset.side_effect = BadVersionError("8.5.x", None, "8.5.x")

        result = upload_resource(make_feature(), strategy)
        assert not result.ok
        assert result.kind == ErrorKind.VALIDATION
        assert isinstance(result.error, RepositoryBadDataError)
        assert result.error.bad_version == "8.5.x"

    def test_other_errors_propagate(self, make_feature):
        strategy = mock.MagicMock()
        strategy.perform_edition_checking.return_value = True
        strategy.upload_asset.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            upload_resource(make_feature(), strategy)
