"""Tests for date parsing and year inference."""
from datetime import date, datetime, timedelta, timezone

from spendtrack.utils import ParseStats
from spendtrack.utils.date_parser import (
    build_date,
    coerce_day,
    month_number,
    normalize_date_string,
    parse_date,
    resolve_year,
    to_iso
)


class TestParseDate:
    """Test date parsing."""

    def test_parse_us_numeric(self):
        """Test MM/DD/YYYY."""
        assert parse_date("01/15/2025") == datetime(2025, 1, 15, tzinfo=timezone.utc)

    def test_parse_iso(self):
        """Test ISO date."""
        assert parse_date("2025-01-15") == datetime(2025, 1, 15, tzinfo=timezone.utc)

    def test_parse_iso_with_zulu(self):
        """Test ISO timestamp with a Z suffix."""
        assert parse_date("2025-01-15T00:00:00.000Z") == datetime(2025, 1, 15, tzinfo=timezone.utc)

    def test_parse_day_first(self):
        """Test day-first numeric dates."""
        assert parse_date("15/01/2025", dayfirst=True) == datetime(2025, 1, 15, tzinfo=timezone.utc)
        assert parse_date("05/01/2025", dayfirst=True) == datetime(2025, 1, 5, tzinfo=timezone.utc)

    def test_parse_month_name(self):
        """Test 'DD Mon YYYY'."""
        assert parse_date("15 Nov 2025") == datetime(2025, 11, 15, tzinfo=timezone.utc)

    def test_parse_abbreviation_with_period_and_ordinal(self):
        """Test 'Mon. Dth, YYYY'."""
        assert parse_date("Jan. 5th, 2025") == datetime(2025, 1, 5, tzinfo=timezone.utc)

    def test_result_is_utc(self):
        """Test that naive input is read as UTC."""
        assert parse_date("2025-06-01").tzinfo == timezone.utc

    def test_parse_date_object(self):
        """Test that date objects become midnight UTC."""
        assert parse_date(date(2025, 3, 4)) == datetime(2025, 3, 4, tzinfo=timezone.utc)

    def test_invalid_date_falls_back_to_now(self):
        """Test that unparseable input becomes the current time and is counted."""
        stats = ParseStats()
        before = datetime.now(timezone.utc)
        result = parse_date("not a date", stats)

        assert stats.date_fallbacks == 1
        assert result.tzinfo == timezone.utc
        assert before - timedelta(seconds=1) <= result <= datetime.now(timezone.utc)

    def test_empty_date_falls_back(self):
        """Test that an empty date is counted as a fallback."""
        stats = ParseStats()
        parse_date("", stats)
        assert stats.date_fallbacks == 1


class TestBuildDate:
    """Test building dates from parsed components."""

    def test_build_valid_date(self):
        """Test a valid date."""
        assert build_date(2025, 1, 31) == datetime(2025, 1, 31, tzinfo=timezone.utc)

    def test_impossible_date_falls_back(self):
        """Test that 30 February takes the fallback path."""
        stats = ParseStats()
        build_date(2025, 2, 30, stats)
        assert stats.date_fallbacks == 1


class TestResolveYear:
    """Test year inference from a statement period."""

    def test_period_crossing_year_start_month(self):
        """Test months from the start month belong to the start year."""
        assert resolve_year(12, date(2024, 12, 15), date(2025, 1, 14)) == 2024

    def test_period_crossing_year_later_month(self):
        """Test months before the start month belong to the end year."""
        assert resolve_year(1, date(2024, 12, 15), date(2025, 1, 14)) == 2025

    def test_period_within_one_year(self):
        """Test every month takes the end year."""
        assert resolve_year(10, date(2025, 9, 26), date(2025, 10, 25)) == 2025
        assert resolve_year(9, date(2025, 9, 26), date(2025, 10, 25)) == 2025


class TestDateHelpers:
    """Test small date helpers."""

    def test_month_number(self):
        """Test month abbreviations."""
        assert month_number("Jan") == 1
        assert month_number("Nov") == 11
        assert month_number("december") == 12
        assert month_number("xyz") is None

    def test_to_iso(self):
        """Test ISO rendering with milliseconds."""
        assert to_iso(datetime(2025, 1, 15, tzinfo=timezone.utc)) == "2025-01-15T00:00:00.000Z"

    def test_coerce_day(self):
        """Test filter bound conversion."""
        assert coerce_day("2025-01-31") == date(2025, 1, 31)
        assert coerce_day(date(2025, 1, 31)) == date(2025, 1, 31)
        assert coerce_day(datetime(2025, 1, 31, 12, tzinfo=timezone.utc)) == date(2025, 1, 31)
        assert coerce_day(None) is None
        assert coerce_day("") is None

    def test_coerce_day_other_formats(self):
        """Test non-ISO bounds are read with dateutil."""
        assert coerce_day("01/31/2025") == date(2025, 1, 31)
        assert coerce_day("Jan 31, 2025") == date(2025, 1, 31)

    def test_coerce_day_invalid(self):
        """Test that a non-date string means no bound."""
        assert coerce_day("garbage") is None

    def test_normalize_date_string(self):
        """Test whitespace and ordinal cleanup."""
        assert normalize_date_string("10 / 22 / 2025") == "10/22/2025"
        assert normalize_date_string("1st Jan 2025") == "1 Jan 2025"
        assert normalize_date_string("Jan.  5,  2025") == "Jan 5, 2025"
