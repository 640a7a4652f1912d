"""Tests for date formatting and the readme deprecation heuristic."""

from datetime import datetime, timezone

import pytest

from src.release_check.data_models import (
    INVALID_DATE,
    NOT_FOUND,
    POSSIBLE_DEPRECATION,
)
from src.release_check.normalization import (
    detect_readme_deprecation,
    format_release_date,
    parse_release_timestamp,
    strip_version_prefix,
)


class TestFormatReleaseDate:
    """Test format_release_date."""

    def test_no_zero_padding(self):
        """Month and day are not zero padded."""
        assert format_release_date("2020-01-05T00:00:00.000Z") == "2020/1/5"

    def test_two_digit_month_and_day(self):
        assert format_release_date("2016-11-21T17:41:20.123Z") == "2016/11/21"

    def test_offset_converted_to_utc(self):
        """Dates are taken in UTC, not in the timestamp's own offset."""
        assert format_release_date("2023-10-27T23:30:00-05:00") == "2023/10/28"

    def test_naive_timestamp_taken_as_utc(self):
        assert format_release_date("2023-05-22T15:12:44") == "2023/5/22"

    def test_date_only(self):
        assert format_release_date("2019-07-04") == "2019/7/4"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_value(self, value):
        assert format_release_date(value) == NOT_FOUND

    @pytest.mark.parametrize("value", ["yesterday", "2020-13-45", 12345])
    def test_unparsable_value(self, value):
        assert format_release_date(value) == INVALID_DATE


class TestParseReleaseTimestamp:
    """Test parse_release_timestamp."""

    def test_returns_aware_utc(self):
        parsed = parse_release_timestamp("2018-04-09T00:28:22.145Z")
        assert parsed == datetime(2018, 4, 9, 0, 28, 22, 145000, tzinfo=timezone.utc)

    def test_non_string(self):
        assert parse_release_timestamp(None) is None
        assert parse_release_timestamp({"time": "x"}) is None


class TestDetectReadmeDeprecation:
    """Test the readme heuristic."""

    @pytest.mark.parametrize(
        "text",
        [
            "This package is DEPRECATED.",
            "No longer maintained, see fork.",
            "Version 1 reached end-of-life in 2020",
            "End of life: please upgrade",
            "EOL",
            "This project is unmaintained",
            "Support for node 4 was dropped",
            "The legacy API has been removed",
        ],
    )
    def test_trigger_phrases(self, text):
        assert detect_readme_deprecation(text) == POSSIBLE_DEPRECATION

    @pytest.mark.parametrize(
        "text",
        [
            "EOLed in 2021",
            "deprecatedSince: 2.0",
            "See features_removed for the list",
            "Keeps undeprecatedish things",
        ],
    )
    def test_trigger_phrases_inside_words(self, text):
        assert detect_readme_deprecation(text) == POSSIBLE_DEPRECATION

    @pytest.mark.parametrize(
        "text",
        [
            "A geolocation helper",
            "Pads strings on the left",
        ],
    )
    def test_eol_must_start_a_word(self, text):
        assert detect_readme_deprecation(text) == ""

    @pytest.mark.parametrize("text", [None, "", 42])
    def test_empty_or_non_text(self, text):
        assert detect_readme_deprecation(text) == ""


def test_strip_version_prefix():
    assert strip_version_prefix("v1.2.0") == "1.2.0"
    assert strip_version_prefix("V2.0") == "2.0"
    assert strip_version_prefix("1.2.0") == "1.2.0"
    assert strip_version_prefix("") == ""
