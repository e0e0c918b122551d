"""Tests for date utilities."""

from datetime import date, datetime

import pytest

from misogi.utils.dates import (
    day_of_year,
    days_left_in_year,
    format_date,
    is_future,
    is_valid_key,
    parse_date,
    shift_date,
    week_number,
)


class TestFormatDate:
    """Tests for log key formatting."""

    def test_date(self):
        assert format_date(date(2026, 1, 5)) == "2026-01-05"

    def test_time_of_day_ignored(self):
        """Any time on the same day gives the same key."""
        morning = datetime(2026, 3, 14, 0, 0, 1)
        night = datetime(2026, 3, 14, 23, 59, 59)
        assert format_date(morning) == format_date(night) == "2026-03-14"

    @pytest.mark.parametrize("hour", [1, 9, 13, 22])
    def test_round_trip(self, hour):
        """Parsing a key and formatting it again is stable."""
        key = format_date(datetime(2026, 7, 4, hour, 30))
        assert format_date(parse_date(key)) == key

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_date("2026-02-30")
        with pytest.raises(ValueError):
            parse_date("yesterday")

    def test_is_valid_key(self):
        assert is_valid_key("2026-01-01")
        assert not is_valid_key("2026-1-1")
        assert not is_valid_key("2026-13-01")
        assert not is_valid_key(None)


class TestDayOfYear:
    """Tests for day_of_year."""

    def test_first_day(self):
        assert day_of_year(date(2026, 1, 1)) == 1

    def test_march_first(self):
        assert day_of_year(date(2026, 3, 1)) == 60
        assert day_of_year(date(2024, 3, 1)) == 61

    def test_last_day(self):
        assert day_of_year(date(2026, 12, 31)) == 365
        assert day_of_year(date(2024, 12, 31)) == 366

    def test_datetime_accepted(self):
        assert day_of_year(datetime(2026, 2, 1, 18, 45)) == 32

    def test_days_left(self):
        assert days_left_in_year(date(2026, 1, 1)) == 364
        assert days_left_in_year(date(2026, 12, 31)) == 0
        # Leap-year December 31 does not go negative
        assert days_left_in_year(date(2024, 12, 31)) == 0


class TestWeekNumber:
    """Tests for the simplified week numbering."""

    @pytest.mark.parametrize("year", range(2020, 2031))
    def test_january_first_is_week_one(self, year):
        assert week_number(date(year, 1, 1)) == 1

    def test_week_two_starts_on_first_sunday(self):
        # January 1, 2026 is a Thursday
        assert week_number(date(2026, 1, 3)) == 1
        assert week_number(date(2026, 1, 4)) == 2
        assert week_number(date(2026, 1, 10)) == 2
        assert week_number(date(2026, 1, 11)) == 3

    def test_not_iso_week(self):
        """ISO weeks cross the year boundary; these restart every January 1."""
        assert week_number(date(2026, 12, 31)) == 53
        # ISO puts January 1, 2027 (a Friday) in week 53 of 2026
        assert date(2027, 1, 1).isocalendar()[1] == 53
        assert week_number(date(2027, 1, 1)) == 1

    def test_sunday_start_year(self):
        # January 1, 2023 is a Sunday: the first week is a full week
        assert week_number(date(2023, 1, 7)) == 1
        assert week_number(date(2023, 1, 8)) == 2


class TestNavigation:
    """Tests for moving between days."""

    def test_shift_across_year_boundary(self):
        assert shift_date("2026-01-01", -1) == "2025-12-31"
        assert shift_date("2025-12-31", 1) == "2026-01-01"

    def test_is_future(self):
        reference = date(2026, 6, 1)
        assert is_future("2026-06-02", reference)
        assert not is_future("2026-06-01", reference)
        assert not is_future("2026-05-31", reference)
