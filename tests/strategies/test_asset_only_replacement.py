import pytest

from lars.model.state import State
from lars.resources.exceptions import RepositoryResourceUpdateError
from lars.strategies import AddNewStrategy, AssetOnlyReplacementStrategy


@pytest.mark.short
class TestAssetOnlyReplacementStrategy:
    def test_requires_a_match(self, make_feature):
        with pytest.raises(RepositoryResourceUpdateError) as excinfo:
            make_feature().upload(AssetOnlyReplacementStrategy())
        assert "No matching resource found" in str(excinfo.value)

    def test_updates_published_match_in_place(self, connection, make_feature):
        old = make_feature(content=b"original")
        old.upload(AddNewStrategy(None, State.PUBLISHED))
        old_attachment = old.main_attachment

        new = make_feature(description="Better JSON-P support", content=b"ignored")
        new.upload(AssetOnlyReplacementStrategy())

        assert new.id == old.id
        assert new.state == State.PUBLISHED
        stored = connection.get_resource(old.id)
        assert stored.asset.description == "Better JSON-P support"
        assert [a.id for a in stored.attachments] == [old_attachment.id]
        assert stored.get_attachment_content(stored.main_attachment) == b"original"
        assert len(connection.get_all_resources()) == 1

    def test_unchanged_resource_is_adopted(self, make_feature):
        old = make_feature()
        old.upload(AddNewStrategy(None, State.AWAITING_APPROVAL))

        same = make_feature()
        same.upload(AssetOnlyReplacementStrategy())
        assert same.id == old.id
        assert same.state == State.AWAITING_APPROVAL

    def test_force_replace(self, connection, make_feature):
        old = make_feature()
        old.upload(AddNewStrategy(None, State.PUBLISHED))

        same = make_feature()
        same.upload(AssetOnlyReplacementStrategy(force_replace=True))
        assert same.id == old.id
        assert connection.get_resource(old.id).state == State.PUBLISHED

    def test_only_first_of_several_matches_is_updated(self, connection, make_feature, capture_logs):
        first = make_feature()
        first.upload(AddNewStrategy())
        second = make_feature()
        second.upload(AddNewStrategy())

        new = make_feature(description="changed")
        new.upload(AssetOnlyReplacementStrategy())

        assert new.id == first.id
        assert connection.get_resource(first.id).asset.description == "changed"
        assert connection.get_resource(second.id).asset.description == "JSON-P support"
        assert f"only {first.id} will be updated" in capture_logs.getvalue()

    def test_explicit_matching_resource(self, make_feature):
        other = make_feature(name="Something else", symbolic_name="other-1.0")
        other.upload(AddNewStrategy())

        resource = make_feature()
        resource.upload(AssetOnlyReplacementStrategy(matching_resource=other))
        assert resource.id == other.id
        assert resource.name == "JSON Processing"
