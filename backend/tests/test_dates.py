"""ISO week and calendar-day helper tests."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from intranet.core.dates import (
    all_weeks_for_year,
    format_date_with_week,
    iso_week,
    iter_nights,
    normalize_day,
    weeks_in_year,
)


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (date(2025, 1, 1), 1),
        (date(2024, 12, 30), 1),
        (date(2021, 1, 3), 53),
        (date(2020, 12, 31), 53),
        (date(2023, 1, 1), 52),
        (date(2025, 6, 12), 24),
        (date(2026, 12, 28), 53),
    ],
)
def test_iso_week_matches_thursday_rule(day: date, expected: int) -> None:
    assert iso_week(day) == expected


def test_iso_week_agrees_with_isocalendar_over_several_years() -> None:
    day = date(2019, 12, 1)
    while day < date(2028, 2, 1):
        assert iso_week(day) == day.isocalendar().week
        day += timedelta(days=1)


def test_iso_week_is_monotonic_within_a_year_and_wraps_to_one() -> None:
    previous = iso_week(date(2025, 1, 6))
    day = date(2025, 1, 7)
    wrapped = False
    while day <= date(2026, 1, 10):
        current = iso_week(day)
        if current < previous:
            assert current == 1
            wrapped = True
        else:
            assert current - previous in (0, 1)
        previous = current
        day += timedelta(days=1)
    assert wrapped


@pytest.mark.parametrize(
    ("year", "weeks"), [(2015, 53), (2020, 53), (2026, 53), (2024, 52), (2025, 52)]
)
def test_weeks_in_year(year: int, weeks: int) -> None:
    assert weeks_in_year(year) == weeks
    assert all_weeks_for_year(year) == list(range(1, weeks + 1))


def test_normalize_day_keeps_the_carried_calendar_day() -> None:
    late_evening = datetime(2025, 6, 12, 23, 30, tzinfo=timezone(timedelta(hours=2)))
    assert normalize_day(late_evening) == date(2025, 6, 12)
    assert normalize_day("2025-06-12") == date(2025, 6, 12)
    assert normalize_day("2025-06-12T23:59:00+02:00") == date(2025, 6, 12)


def test_format_date_with_week() -> None:
    assert format_date_with_week(date(2025, 6, 12)) == "2025-06-12 (v.24)"


def test_nights_exclude_checkout_day() -> None:
    nights = list(iter_nights(date(2025, 6, 10), date(2025, 6, 12)))
    assert nights == [date(2025, 6, 10), date(2025, 6, 11)]
