import pytest

from lars.model.asset import Asset, WlpInformation
from lars.model.enums import ResourceType
from lars.versioning.compare import (
    compare_applies_to,
    get_newer_resource,
    get_resource_with_higher_version,
    is_beta,
    min_and_max_version,
    return_non_beta_resource_or_null,
)
from lars.versioning.exceptions import BadVersionError
from lars.versioning.version import MAX_VERSION, parse_version4


def feature(applies_to, version=None):
    return Asset(
        type=ResourceType.FEATURE,
        name="feature",
        version=version,
        wlp_information=WlpInformation(applies_to=applies_to),
    )


def install(product_version, version=None):
    return Asset(
        type=ResourceType.INSTALL,
        name="runtime",
        version=version,
        wlp_information=WlpInformation(
            product_id="com.ibm.websphere.appserver", product_version=product_version
        ),
    )


OLD = "com.ibm.websphere.appserver; productVersion=8.5.5.5"
NEW = "com.ibm.websphere.appserver; productVersion=8.5.5.9"
BETA = "com.ibm.websphere.appserver; productVersion=2016.1.0.0"
OTHER_BETA = "com.ibm.websphere.appserver; productVersion=2016.2.0.0"


@pytest.mark.short
class TestBeta:
    def test_is_beta(self):
        assert is_beta(feature(BETA))
        assert not is_beta(feature(NEW))
        assert not is_beta(feature("com.ibm.websphere.appserver"))

    def test_install_uses_its_product_version(self):
        assert is_beta(install("2016.1.0.0"))
        assert not is_beta(install("8.5.5.9"))

    def test_non_beta_wins_in_either_order(self):
        beta, release = feature(BETA), feature(NEW)
        assert return_non_beta_resource_or_null(beta, release) is release
        assert return_non_beta_resource_or_null(release, beta) is release

    def test_two_betas_or_two_releases(self):
        assert return_non_beta_resource_or_null(feature(BETA), feature(OTHER_BETA)) is None
        assert return_non_beta_resource_or_null(feature(OLD), feature(NEW)) is None


@pytest.mark.short
class TestNewerResource:
    def test_higher_min_version_wins(self):
        old, new = feature(OLD), feature(NEW)
        assert get_newer_resource(old, new) is new
        assert get_newer_resource(new, old) is new

    def test_release_beats_beta(self):
        release, beta = feature(NEW), feature(BETA)
        assert get_newer_resource(beta, release) is release

    def test_two_betas_compare_versions(self):
        first, second = feature(BETA), feature(OTHER_BETA)
        assert get_newer_resource(first, second) is second

    def test_open_ended_max_wins(self):
        closed = feature(NEW)
        open_ended = feature(NEW + "+")
        assert compare_applies_to(closed, open_ended) is open_ended

    def test_same_range_falls_back_to_resource_version(self):
        first, second = feature(NEW, "1.0.0"), feature(NEW, "1.0.1")
        assert compare_applies_to(first, second) is second
        assert compare_applies_to(second, first) is second

    def test_install_compares_product_versions(self):
        old, new = install("8.5.5.5"), install("8.5.5.9")
        assert get_newer_resource(new, old) is new
        assert get_newer_resource(old, new) is new

    def test_install_with_bad_product_version(self):
        with pytest.raises(BadVersionError):
            get_newer_resource(install("8.5.x"), install("8.5.5.9"))

    def test_range_strings(self):
        minimum, maximum = min_and_max_version(feature(NEW + "+"))
        assert str(minimum) == "8.5.5.9"
        assert maximum is MAX_VERSION
        assert min_and_max_version(feature(OLD)).max == parse_version4("8.5.5.5")


@pytest.mark.short
class TestResourceVersion:
    def test_higher_version(self):
        first, second = feature(None, "1.0"), feature(None, "1.10")
        assert get_resource_with_higher_version(first, second) is second

    def test_unparseable_or_missing_versions_keep_the_first(self):
        first, second = feature(None, "not a version"), feature(None, "2.0")
        assert get_resource_with_higher_version(first, second) is first
        missing = feature(None)
        assert get_resource_with_higher_version(missing, second) is missing
