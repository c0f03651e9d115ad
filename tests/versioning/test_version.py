import pytest

from lars.versioning.exceptions import BadVersionError
from lars.versioning.version import (
    MAX_VERSION,
    MIN_VERSION,
    Version4Digit,
    compare_versions,
    parse_version4,
)


@pytest.mark.short
class TestParseVersion4:
    def test_full_version(self):
        version = parse_version4("8.5.5.9")
        assert (version.major, version.minor, version.micro, version.qualifier) == (8, 5, 5, "9")
        assert str(version) == "8.5.5.9"

    def test_missing_segments_default_to_zero(self):
        assert parse_version4("8.5.5") == Version4Digit(8, 5, 5, "0")
        assert parse_version4("8") == Version4Digit(8)

    def test_text_qualifier(self):
        assert parse_version4("8.5.5.cl160120160811-0923").qualifier == "cl160120160811-0923"

    @pytest.mark.parametrize("bad", ["", "8.x.5", "8.5.5.9.1", "a", "8..5", "8.5.5.9 beta"])
    def test_malformed_versions_are_rejected(self, bad):
        with pytest.raises(BadVersionError):
            parse_version4(bad)

    def test_error_carries_the_range(self):
        with pytest.raises(BadVersionError) as excinfo:
            parse_version4("8.5.x", "8.5.x", "9.0.0.0")
        assert excinfo.value.bad_version == "8.5.x"
        assert excinfo.value.min_version == "8.5.x"
        assert excinfo.value.max_version == "9.0.0.0"
        assert isinstance(excinfo.value, ValueError)

    def test_none_is_rejected(self):
        with pytest.raises(BadVersionError):
            parse_version4(None)


@pytest.mark.short
class TestVersionOrdering:
    def test_segment_by_segment(self):
        assert parse_version4("8.5.5.9") > parse_version4("8.5.5.5")
        assert parse_version4("8.5.10") > parse_version4("8.5.9")
        assert parse_version4("9.0") > parse_version4("8.5.5.9")

    def test_numeric_qualifiers_compare_as_numbers(self):
        assert parse_version4("8.5.5.10") > parse_version4("8.5.5.9")

    def test_sentinels_bound_every_version(self):
        assert MIN_VERSION < parse_version4("0.0.0.0")
        assert MAX_VERSION > parse_version4("2147483647.0.0.0")
        assert MIN_VERSION.is_unbounded and MAX_VERSION.is_unbounded
        assert not parse_version4("1.0").is_unbounded

    def test_sentinel_strings(self):
        assert str(MIN_VERSION) == "0.0.0.0"
        assert str(MAX_VERSION) == "2147483647.0.0.0"

    def test_equality_and_hash(self):
        assert parse_version4("8.5.5") == parse_version4("8.5.5.0")
        assert len({parse_version4("8.5.5"), parse_version4("8.5.5.0")}) == 1
        assert parse_version4("8.5.5") != "8.5.5"

    def test_compare_versions(self):
        assert compare_versions("8.5.5.5", "8.5.5.9") == -1
        assert compare_versions("8.5.5.9", "8.5.5.9") == 0
        assert compare_versions("16.0.0.2", "8.5.5.9") == 1
