import pytest

from lars.versioning.applies_to import (
    ALL_EDITIONS,
    BETA_EDITIONS,
    get_min_and_max_version,
    is_beta_version,
    parse_applies_to,
    validate_editions,
)
from lars.versioning.exceptions import (
    AppliesToFormatError,
    BadVersionError,
    UnknownEditionError,
)
from lars.versioning.version import MAX_VERSION, MIN_VERSION, parse_version4


@pytest.mark.short
class TestParseAppliesTo:
    def test_empty_header(self):
        assert parse_applies_to(None) == []
        assert parse_applies_to("  ") == []

    def test_product_only(self):
        [info] = parse_applies_to("com.ibm.websphere.appserver")
        assert info.product_id == "com.ibm.websphere.appserver"
        assert info.min_version is None
        assert info.max_version is None
        assert info.editions == ALL_EDITIONS

    def test_exact_version(self):
        [info] = parse_applies_to("com.ibm.websphere.appserver; productVersion=8.5.5.9")
        assert info.min_version.value == "8.5.5.9"
        assert info.max_version.value == "8.5.5.9"
        assert info.min_version.label == "8.5.5"
        assert info.min_version.compatibility_label == "8.5.5.9"
        assert info.has_max_version

    def test_open_ended_version(self):
        [info] = parse_applies_to("com.ibm.websphere.appserver; productVersion=8.5.5.9+")
        assert info.min_version.value == "8.5.5.9"
        assert info.min_version.inclusive
        assert info.max_version is None
        assert not info.has_max_version

    def test_editions_and_install_type(self):
        [info] = parse_applies_to(
            'com.ibm.websphere.appserver; productEdition="BASE,ND,zOS"; productInstallType=Archive'
        )
        assert info.raw_editions == ["BASE", "ND", "zOS"]
        assert info.editions == ["Base", "ND", "z/OS"]
        assert info.install_type == "Archive"

    def test_beta_version(self):
        [info] = parse_applies_to("com.ibm.websphere.appserver; productVersion=2016.1.0.0")
        assert info.min_version.label == "Betas"
        assert info.min_version.compatibility_label == "Betas"
        assert info.editions == BETA_EDITIONS

    def test_multiple_clauses(self):
        first, second = parse_applies_to(
            'com.ibm.websphere.appserver; productVersion=8.5.5.9+; productEdition="BASE,ND", '
            "com.ibm.websphere.other; productVersion=1.0"
        )
        assert first.product_id == "com.ibm.websphere.appserver"
        assert first.raw_editions == ["BASE", "ND"]
        assert second.product_id == "com.ibm.websphere.other"
        # Only the last clause gets the default editions
        assert second.editions == ALL_EDITIONS

    def test_missing_product_id(self):
        with pytest.raises(AppliesToFormatError):
            parse_applies_to("; productVersion=8.5.5.9")

    def test_unbalanced_quotes(self):
        with pytest.raises(AppliesToFormatError):
            parse_applies_to('com.ibm.websphere.appserver; productEdition="BASE,ND')


@pytest.mark.short
class TestMinAndMaxVersion:
    def test_no_version(self):
        assert get_min_and_max_version("com.ibm.websphere.appserver") == (MIN_VERSION, MAX_VERSION)
        assert get_min_and_max_version(None) == (MIN_VERSION, MAX_VERSION)

    def test_exact(self):
        minimum, maximum = get_min_and_max_version("p; productVersion=8.5.5.9")
        assert minimum == parse_version4("8.5.5.9")
        assert maximum == parse_version4("8.5.5.9")

    def test_open_ended(self):
        minimum, maximum = get_min_and_max_version("p; productVersion=8.5.5.9+")
        assert minimum == parse_version4("8.5.5.9")
        assert maximum is MAX_VERSION

    def test_widest_range_over_clauses(self):
        result = get_min_and_max_version("p; productVersion=8.5.5.9, q; productVersion=8.5.5.5")
        assert result.min == parse_version4("8.5.5.5")
        assert result.max == parse_version4("8.5.5.9")

    def test_malformed_version(self):
        with pytest.raises(BadVersionError) as excinfo:
            get_min_and_max_version("p; productVersion=8.5.x+")
        assert excinfo.value.bad_version == "8.5.x"


@pytest.mark.short
class TestEditions:
    def test_beta_pattern(self):
        assert is_beta_version("2016.1.0.0")
        assert is_beta_version("2099.12.0.0")
        assert not is_beta_version("8.5.5.9")
        assert not is_beta_version("16.0.0.2")
        assert not is_beta_version(None)

    def test_known_editions_pass(self):
        validate_editions(parse_applies_to('p; productEdition="BASE,ND,DEVELOPERS,zOS_ILAN"'))

    def test_unknown_edition(self):
        with pytest.raises(UnknownEditionError) as excinfo:
            validate_editions(parse_applies_to('p; productEdition="BASE,PLATINUM"'))
        assert excinfo.value.edition == "PLATINUM"
