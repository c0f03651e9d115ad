import pytest

from lars.model.state import State
from lars.strategies import AddNewStrategy


@pytest.mark.short
class TestAddNewStrategy:
    def test_defaults_to_draft(self, make_feature):
        resource = make_feature()
        resource.upload(AddNewStrategy())
        assert resource.id
        assert resource.state == State.DRAFT
        assert len(resource.attachments) == 1

    def test_configured_state(self, make_feature):
        resource = make_feature()
        resource.upload(AddNewStrategy(None, State.PUBLISHED))
        assert resource.state == State.PUBLISHED

    def test_never_matches_and_never_deletes(self, connection, make_feature):
        first = make_feature()
        first.upload(AddNewStrategy(None, State.PUBLISHED))

        strategy = AddNewStrategy(State.PUBLISHED, State.DRAFT)
        second = make_feature()
        assert strategy.find_matching_resources(second) == []
        second.upload(strategy)

        # The match state setting plays no part
        assert second.state == State.DRAFT
        assert second.id != first.id
        assert len(connection.get_all_resources()) == 2

    def test_edition_checking_flag(self, make_feature):
        assert AddNewStrategy().perform_edition_checking()
        resource = make_feature(applies_to="com.ibm.websphere.appserver; productEdition=PLATINUM")
        resource.upload(AddNewStrategy(edition_checking=False))
        assert resource.id
