from unittest import mock

import pytest

from lars.model.state import State
from lars.resources.exceptions import RepositoryResourceLifecycleError
from lars.resources.resource import RepositoryResource
from lars.strategies import AddNewStrategy, AddThenDeleteStrategy


def _ids(connection):
    return sorted(r.id for r in connection.get_all_resources())


@pytest.mark.short
class TestAddThenDeleteStrategy:
    def test_first_upload(self, connection, make_feature):
        strategy = AddThenDeleteStrategy()
        resource = make_feature()
        resource.upload(strategy)
        assert resource.state == State.DRAFT
        assert strategy.deleted_resources == []
        assert _ids(connection) == [resource.id]

    def test_changed_resource_replaces_match(self, connection, make_feature):
        old = make_feature()
        old.upload(AddNewStrategy(None, State.PUBLISHED))

        strategy = AddThenDeleteStrategy()
        new = make_feature(description="Better JSON-P support")
        new.upload(strategy)

        assert new.id != old.id
        # Takes the state of the match it replaces
        assert new.state == State.PUBLISHED
        assert [r.id for r in strategy.deleted_resources] == [old.id]
        assert _ids(connection) == [new.id]

    def test_configured_state_for_matches(self, make_feature):
        make_feature().upload(AddNewStrategy(None, State.PUBLISHED))
        new = make_feature(description="changed")
        new.upload(AddThenDeleteStrategy(State.DRAFT))
        assert new.state == State.DRAFT

    def test_unchanged_resource_is_adopted(self, connection, make_feature):
        old = make_feature()
        old.upload(AddNewStrategy(None, State.PUBLISHED))

        strategy = AddThenDeleteStrategy()
        same = make_feature()
        same.upload(strategy)

        assert same.id == old.id
        assert same.state == State.PUBLISHED
        assert strategy.deleted_resources == []
        assert _ids(connection) == [old.id]

    def test_changed_attachment_replaces_match(self, connection, make_feature):
        old = make_feature(content=b"one")
        old.upload(AddNewStrategy())

        new = make_feature(content=b"two")
        new.upload(AddThenDeleteStrategy())

        assert new.id != old.id
        assert _ids(connection) == [new.id]
        assert new.get_attachment_content(new.main_attachment) == b"two"

    def test_force_replace(self, connection, make_feature):
        old = make_feature()
        old.upload(AddNewStrategy())

        new = make_feature()
        new.upload(AddThenDeleteStrategy(force_replace=True))
        assert new.id != old.id
        assert _ids(connection) == [new.id]

    def test_duplicates_are_removed(self, connection, make_feature, capture_logs):
        first = make_feature()
        first.upload(AddNewStrategy())
        second = make_feature()
        second.upload(AddNewStrategy())

        strategy = AddThenDeleteStrategy()
        same = make_feature()
        same.upload(strategy)

        assert same.id == first.id
        assert [r.id for r in strategy.deleted_resources] == [second.id]
        assert _ids(connection) == [first.id]
        assert "Deleting duplicate" in capture_logs.getvalue()

    def test_explicit_matching_resource(self, connection, make_feature):
        other = make_feature(name="Something else", symbolic_name="other-1.0")
        other.upload(AddNewStrategy())

        strategy = AddThenDeleteStrategy(matching_resource=other)
        resource = make_feature()
        assert strategy.find_matching_resources(resource) == [other]
        resource.upload(strategy)
        assert _ids(connection) == [resource.id]

    def test_match_survives_a_failed_upload(self, connection, make_feature):
        old = make_feature()
        old.upload(AddNewStrategy())

        failure = RepositoryResourceLifecycleError("refused", None, State.DRAFT, None)
        with mock.patch.object(RepositoryResource, "move_to_state", side_effect=failure):
            with pytest.raises(RepositoryResourceLifecycleError):
                make_feature(description="changed").upload(AddThenDeleteStrategy())

        assert old.id in _ids(connection)
