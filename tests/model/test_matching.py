import pytest

from lars.model.asset import Asset, Provider, WlpInformation
from lars.model.enums import ResourceType
from lars.model.matching import MatchingData, create_matching_data


def _asset(type, name="thing", provider="IBM", **wlp):
    return Asset(
        type=type,
        name=name,
        provider=Provider(name=provider),
        version=wlp.pop("version", None),
        wlp_information=WlpInformation(**wlp),
    )


@pytest.mark.short
class TestMatchingData:
    def test_base_key_is_type_name_provider(self):
        first = create_matching_data(_asset(ResourceType.PRODUCTSAMPLE, applies_to="a; productVersion=1.0.0.0"))
        second = create_matching_data(_asset(ResourceType.PRODUCTSAMPLE, applies_to="b"))
        assert first == second
        assert not first.extended

    def test_provider_is_part_of_the_key(self):
        first = create_matching_data(_asset(ResourceType.TOOL, provider="IBM"))
        second = create_matching_data(_asset(ResourceType.TOOL, provider="Someone else"))
        assert first != second

    def test_feature_key_includes_applies_to(self):
        old = _asset(
            ResourceType.FEATURE,
            provide_feature="jsonp-1.0",
            applies_to="com.ibm.websphere.appserver; productVersion=8.5.5.5",
        )
        new = _asset(
            ResourceType.FEATURE,
            provide_feature="jsonp-1.0",
            applies_to="com.ibm.websphere.appserver; productVersion=8.5.5.9",
        )
        assert create_matching_data(old) != create_matching_data(new)

    def test_feature_key_includes_version(self):
        first = _asset(ResourceType.FEATURE, provide_feature="f", version="1.0")
        second = _asset(ResourceType.FEATURE, provide_feature="f", version="2.0")
        assert create_matching_data(first) != create_matching_data(second)

    def test_filter_order_is_irrelevant(self):
        first = _asset(ResourceType.ADDON, applies_to="a; productVersion=8.5.5.9, b")
        second = _asset(ResourceType.ADDON, applies_to="b, a; productVersion=8.5.5.9")
        # Only the last clause gets default editions, so order does change the entries
        assert create_matching_data(first) != create_matching_data(second)

        same = _asset(ResourceType.ADDON, applies_to='a; productVersion=8.5.5.9; productEdition="BASE", b; productEdition=ND')
        swapped = _asset(ResourceType.ADDON, applies_to='b; productEdition=ND, a; productVersion=8.5.5.9; productEdition="BASE"')
        assert create_matching_data(same) == create_matching_data(swapped)

    def test_install_key_is_product_version(self):
        first = _asset(ResourceType.INSTALL, product_version="8.5.5.9", applies_to="x")
        second = _asset(ResourceType.INSTALL, product_version="8.5.5.9", applies_to="y")
        third = _asset(ResourceType.INSTALL, product_version="8.5.5.8")
        assert create_matching_data(first) == create_matching_data(second)
        assert create_matching_data(first) != create_matching_data(third)

    def test_stored_filter_info_is_ignored(self):
        asset = _asset(ResourceType.FEATURE, provide_feature="f", applies_to="p; productVersion=8.5.5.9")
        stale = asset.model_copy(deep=True)
        stale.wlp_information.applies_to_filter_info = []
        assert create_matching_data(asset) == create_matching_data(stale)

    def test_usable_as_dict_key(self):
        key = create_matching_data(_asset(ResourceType.TOOL))
        assert {key: 1}[create_matching_data(_asset(ResourceType.TOOL))] == 1
        assert MatchingData(ResourceType.TOOL, "thing", "IBM") == key
