"""Tests for normalizer functions."""

from datetime import date, datetime, timedelta, timezone

import pytest

from stocking_scraper.core.normalizer import (
    parse_date,
    to_iso_timestamp,
    format_date_for_url,
    normalize_species,
    parse_species_list,
    format_species,
    extract_number,
    clean_cell_text,
)


class TestParseDate:
    """Tests for parse_date function."""

    def test_month_name_format(self):
        """Test long month-name format."""
        assert parse_date("June 1, 2024") == "2024-06-01T00:00:00.000Z"

    def test_slash_format(self):
        """Test US slash format."""
        assert parse_date("6/1/2024") == "2024-06-01T00:00:00.000Z"

    def test_iso_format(self):
        """Test ISO date."""
        assert parse_date("2024-06-01") == "2024-06-01T00:00:00.000Z"

    def test_surrounding_whitespace(self):
        """Test whitespace is trimmed."""
        assert parse_date("  March 4, 2024 \n") == "2024-03-04T00:00:00.000Z"

    def test_weekday_prefix(self):
        """Test weekday names are accepted."""
        assert parse_date("Monday, March 4, 2024") == "2024-03-04T00:00:00.000Z"

    def test_with_time_and_offset(self):
        """Test aware timestamps are converted to UTC."""
        assert parse_date("2024-06-01T08:30:00-04:00") == "2024-06-01T12:30:00.000Z"

    def test_not_a_date(self):
        """Test free text returns None."""
        assert parse_date("not a date") is None

    def test_month_name_only(self):
        """Test text without digits returns None."""
        assert parse_date("June") is None

    @pytest.mark.parametrize(
        "text",
        [
            "2024-13-45",
            "0001-01-01T00:00:00+05:00",
            "9999-12-31T23:00:00-05:00",
        ],
    )
    def test_out_of_range(self, text):
        """Test impossible dates and UTC overflow at the calendar limits return None."""
        assert parse_date(text) is None

    def test_empty_string(self):
        """Test empty string returns None."""
        assert parse_date("") is None

    def test_none_input(self):
        """Test None input returns None."""
        assert parse_date(None) is None


class TestToIsoTimestamp:
    """Tests for to_iso_timestamp function."""

    def test_naive_is_utc(self):
        """Test naive values are rendered as UTC unchanged."""
        assert to_iso_timestamp(datetime(2024, 6, 1, 9, 5, 3)) == "2024-06-01T09:05:03.000Z"

    def test_milliseconds(self):
        """Test microseconds are truncated to milliseconds."""
        assert to_iso_timestamp(datetime(2024, 6, 1, microsecond=123456)) == "2024-06-01T00:00:00.123Z"

    def test_aware_converted(self):
        """Test aware values are shifted to UTC."""
        tz = timezone(timedelta(hours=-5))
        assert to_iso_timestamp(datetime(2024, 1, 1, 20, 0, tzinfo=tz)) == "2024-01-02T01:00:00.000Z"


class TestFormatDateForUrl:
    """Tests for format_date_for_url function."""

    def test_format(self):
        """Test month name, unpadded day and year."""
        assert format_date_for_url(date(2015, 1, 1)) == "January 1, 2015"

    def test_two_digit_day(self):
        """Test two-digit days."""
        assert format_date_for_url(date(2024, 12, 25)) == "December 25, 2024"


class TestNormalizeSpecies:
    """Tests for normalize_species function."""

    @pytest.mark.parametrize("text", ["rainbow", "Rainbow Trout", "RAINBOW TROUT", "  rainbow trout "])
    def test_rainbow_variants(self, text):
        """Test case and whitespace insensitivity."""
        assert normalize_species(text) == "Rainbow Trout"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("brown", "Brown Trout"),
            ("Brook", "Brook Trout"),
            ("golden trout", "Golden Trout"),
            ("TIGER", "Tiger Trout"),
        ],
    )
    def test_other_species(self, text, expected):
        """Test the remaining canonical species."""
        assert normalize_species(text) == expected

    def test_idempotent(self):
        """Test canonical names map to themselves."""
        for name in ["Rainbow Trout", "Brown Trout", "Brook Trout", "Golden Trout", "Tiger Trout"]:
            assert normalize_species(normalize_species(name)) == name

    def test_unknown_passthrough(self):
        """Test unrecognized species keep their original text."""
        assert normalize_species("Smallmouth Bass") == "Smallmouth Bass"


class TestParseSpeciesList:
    """Tests for parse_species_list function."""

    def test_slash_delimited(self):
        """Test slash-separated short names."""
        assert parse_species_list("Rainbow/Brown") == ["Rainbow Trout", "Brown Trout"]

    def test_plus_delimited(self):
        """Test plus-separated full names."""
        assert parse_species_list("Rainbow Trout + Brook Trout") == ["Rainbow Trout", "Brook Trout"]

    def test_comma_delimited_with_duplicates(self):
        """Test duplicates are removed keeping first occurrence."""
        assert parse_species_list("Brown, rainbow, Brown Trout") == ["Brown Trout", "Rainbow Trout"]

    def test_delimited_unknown_species_kept(self):
        """Test unrecognized parts keep their text."""
        assert parse_species_list("Rainbow/Musky") == ["Rainbow Trout", "Musky"]

    def test_delimited_drops_empty_and_unknown(self):
        """Test empty parts and "Unknown" are dropped."""
        assert parse_species_list("Rainbow + + Unknown") == ["Rainbow Trout"]

    def test_space_separated_without_delimiter(self):
        """Test substring scan over concatenated names."""
        assert parse_species_list("Rainbow Trout Brown Trout") == ["Rainbow Trout", "Brown Trout"]

    def test_concatenated_without_space(self):
        """Test names fused without any separator."""
        assert parse_species_list("Rainbow TroutBrown Trout") == ["Rainbow Trout", "Brown Trout"]

    def test_scan_keeps_order_of_appearance(self):
        """Test scanned names come back in cell order."""
        assert parse_species_list("Tiger TroutRainbow Trout") == ["Tiger Trout", "Rainbow Trout"]

    def test_single_short_name(self):
        """Test fallback normalization of a single token."""
        assert parse_species_list("brook") == ["Brook Trout"]

    def test_unrecognized_single(self):
        """Test a single unrecognized name is kept."""
        assert parse_species_list("Walleye") == ["Walleye"]

    def test_empty(self):
        """Test empty string returns an empty list."""
        assert parse_species_list("") == []

    def test_none(self):
        """Test None returns an empty list."""
        assert parse_species_list(None) == []

    def test_unknown(self):
        """Test a lone "Unknown" returns an empty list."""
        assert parse_species_list("Unknown") == []


class TestFormatSpecies:
    """Tests for format_species function."""

    def test_join(self):
        """Test names are joined with " + "."""
        assert format_species(["Rainbow Trout", "Brown Trout"]) == "Rainbow Trout + Brown Trout"

    def test_empty_is_unknown(self):
        """Test empty list renders as "Unknown"."""
        assert format_species([]) == "Unknown"


class TestExtractNumber:
    """Tests for extract_number function."""

    def test_thousands_separator(self):
        """Test commas are stripped."""
        assert extract_number("1,250 lbs") == 1250

    def test_plain(self):
        """Test a bare integer."""
        assert extract_number("500") == 500

    def test_first_run_wins(self):
        """Test only the first number is taken."""
        assert extract_number("approx. 300 (of 400)") == 300

    def test_no_digits(self):
        """Test text without digits returns None."""
        assert extract_number("no data") is None

    def test_lone_comma(self):
        """Test commas without digits are not a number."""
        assert extract_number("a, b") is None

    def test_empty(self):
        """Test empty string returns None."""
        assert extract_number("") is None


class TestCleanCellText:
    """Tests for clean_cell_text function."""

    def test_collapses_whitespace(self):
        """Test whitespace runs become one space."""
        assert clean_cell_text("  Smith \n\t Creek ") == "Smith Creek"

    def test_non_breaking_space(self):
        """Test non-breaking spaces are treated as whitespace."""
        assert clean_cell_text("Smith\u00a0Creek") == "Smith Creek"

    def test_none(self):
        """Test None returns an empty string."""
        assert clean_cell_text(None) == ""
