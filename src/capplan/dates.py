"""Calendar day utilities.

All comparisons are on calendar days; no time-of-day or time zone is involved.
"""

from collections.abc import Iterator
from datetime import date, datetime, timedelta

SATURDAY = 5  # date.weekday() numbering, Monday=0
SUNDAY = 6


def parse_day(value: date | datetime | str) -> date:
    """Coerce a date, datetime or ISO ``YYYY-MM-DD`` string to a calendar day.

    Raises:
        ValueError: If a string is not a valid ISO date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


def is_weekend(day: date) -> bool:
    """Return True for Saturday and Sunday."""
    return day.weekday() in (SATURDAY, SUNDAY)


def is_within_range(day: date, start: date, end: date) -> bool:
    """Inclusive interval containment test."""
    return start <= day <= end


def step_day(day: date) -> date:
    """Return the calendar day after ``day``."""
    return day + timedelta(days=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end inclusive.

    Yields nothing when start is after end.
    """
    current = start
    while current <= end:
        yield current
        current = step_day(current)


def start_of_week(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())
