"""Calendar helpers for log keys, day-of-year and week numbering."""

import math
from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"


def _as_date(value: date | datetime) -> date:
    """Drop time-of-day and timezone, keeping the local calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def today() -> date:
    """Return the current local calendar day."""
    return date.today()


def format_date(value: date | datetime) -> str:
    """Format a date as the ``YYYY-MM-DD`` key used by the log document.

    The same calendar day always yields the same key, whatever the time of
    day attached to ``value``.
    """
    return _as_date(value).strftime(DATE_FORMAT)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` key back into a date.

    Raises:
        ValueError: If the key is not a valid calendar date.
    """
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def is_valid_key(value: str) -> bool:
    """Check whether a string is a valid log key."""
    if not isinstance(value, str):
        return False
    try:
        return format_date(parse_date(value)) == value
    except ValueError:
        return False


def day_of_year(value: date | datetime) -> int:
    """Return the 1-based day of the year (January 1 is day 1)."""
    d = _as_date(value)
    return (d - date(d.year - 1, 12, 31)).days


def _sunday_based_weekday(d: date) -> int:
    # Sunday = 0 ... Saturday = 6
    return (d.weekday() + 1) % 7


def week_number(value: date | datetime) -> int:
    """Return the week of the year for a date.

    This is not an ISO week. Weeks are counted from January 1 (always week 1),
    shifted by the weekday January 1 falls on, so week 2 starts on the first
    Sunday after January 1.
    """
    d = _as_date(value)
    start_of_year = date(d.year, 1, 1)
    days = (d - start_of_year).days
    return math.ceil((days + _sunday_based_weekday(start_of_year) + 1) / 7)


def days_left_in_year(value: date | datetime) -> int:
    """Days remaining in a 365-day challenge year, never negative."""
    return max(0, 365 - day_of_year(value))


def shift_date(key: str, days: int) -> str:
    """Move a log key forward or backward by a number of days."""
    return format_date(parse_date(key) + timedelta(days=days))


def is_future(key: str, reference: date | None = None) -> bool:
    """Check whether a log key lies after the reference day (default today)."""
    reference = reference or today()
    return parse_date(key) > reference
