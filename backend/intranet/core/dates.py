"""Calendar-day helpers and ISO-8601 week numbers.

Bookings are stored and compared as plain ``datetime.date`` values. Anything
carrying a time component is reduced to its calendar day before use so that
local/UTC conversions can never shift a booking by one day.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from datetime import date, datetime, timedelta

_THURSDAY = 4


def normalize_day(value: date | datetime | str) -> date:
    """Return the timezone-free calendar day for ``value``.

    ``datetime`` values keep the day they carry (no conversion to UTC or local
    time happens first); ISO strings may be plain dates or full timestamps.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if len(text) > 10:
        return datetime.fromisoformat(text).date()
    return date.fromisoformat(text)


def iso_weekday(day: date) -> int:
    """Weekday number with Monday as 1 and Sunday as 7."""
    return day.isoweekday()


def iso_week(value: date | datetime | str) -> int:
    """Return the ISO-8601 week number (1-53) of ``value``.

    Shifts the day to the Thursday of its own week and counts whole weeks from
    January 1 of that Thursday's year.
    """
    day = normalize_day(value)
    thursday = day + timedelta(days=_THURSDAY - iso_weekday(day))
    year_start = date(thursday.year, 1, 1)
    return math.ceil(((thursday - year_start).days + 1) / 7)


def weeks_in_year(year: int) -> int:
    """Return 53 when January 1 or December 31 falls on a Thursday, else 52."""
    jan1 = date(year, 1, 1)
    dec31 = date(year, 12, 31)
    if iso_weekday(jan1) == _THURSDAY or iso_weekday(dec31) == _THURSDAY:
        return 53
    return 52


def all_weeks_for_year(year: int) -> list[int]:
    return list(range(1, weeks_in_year(year) + 1))


def format_date_with_week(value: date | datetime | str) -> str:
    """Format a day as ``YYYY-MM-DD (v.N)``."""
    day = normalize_day(value)
    return f"{day.isoformat()} (v.{iso_week(day)})"


def iter_nights(start: date, end: date) -> Iterator[date]:
    """Yield each charged night in ``[start, end)``; the checkout day is excluded."""
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)


def is_date_between(day: date, start: date, end: date) -> bool:
    """Inclusive range membership."""
    return start <= day <= end
