"""Availability rules for guest apartment bookings.

Everything in this module is pure: callers pass in the reservations they
loaded and get answers back, so the same rules drive the month grid, the
booking pre-check and the HTTP availability endpoint.

Two policies are easy to get wrong:

* Bookings cover ``[start_date, end_date]`` inclusive, but a day that is the
  checkout day of one booking and the check-in day of another is free
  (same-day turnover).
* Rejected bookings never block anything.
"""

from __future__ import annotations

import calendar
import enum
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from intranet.core.dates import is_date_between, iso_week, iso_weekday, normalize_day
from intranet.models.booking import BookingStatus

DayLike = date | str


class ReservationLike(Protocol):
    """Minimal shape of a booking used by the availability rules."""

    id: uuid.UUID
    apartment_id: uuid.UUID
    start_date: date
    end_date: date
    status: BookingStatus


def _is_active(reservation: ReservationLike) -> bool:
    return reservation.status != BookingStatus.REJECTED


def active_reservations(
    reservations: Iterable[ReservationLike],
    apartment_id: uuid.UUID | None = None,
) -> list[ReservationLike]:
    """Return non-rejected reservations, optionally limited to one apartment."""
    return [
        reservation
        for reservation in reservations
        if _is_active(reservation)
        and (apartment_id is None or reservation.apartment_id == apartment_id)
    ]


def ranges_overlap(
    candidate_start: DayLike,
    candidate_end: DayLike,
    existing_start: DayLike,
    existing_end: DayLike,
) -> bool:
    """Return True when two inclusive day ranges collide.

    Ranges that only share a boundary day (one ends the day the other begins)
    do not overlap.
    """
    cs = normalize_day(candidate_start)
    ce = normalize_day(candidate_end)
    es = normalize_day(existing_start)
    ee = normalize_day(existing_end)
    if ce == es or cs == ee:
        return False
    return cs < ee and ce > es


def find_conflicts(
    reservations: Iterable[ReservationLike],
    *,
    apartment_id: uuid.UUID,
    start: DayLike,
    end: DayLike,
    exclude_id: uuid.UUID | None = None,
) -> list[ReservationLike]:
    """Return the active reservations of ``apartment_id`` that collide with a range."""
    return [
        reservation
        for reservation in active_reservations(reservations, apartment_id)
        if reservation.id != exclude_id
        and ranges_overlap(start, end, reservation.start_date, reservation.end_date)
    ]


def is_day_booked(
    reservations: Iterable[ReservationLike],
    apartment_id: uuid.UUID,
    day: DayLike,
) -> bool:
    """Return True when ``day`` is unavailable for ``apartment_id``."""
    target = normalize_day(day)
    active = active_reservations(reservations, apartment_id)
    if not active:
        return False

    is_checkout = any(reservation.end_date == target for reservation in active)
    is_checkin = any(reservation.start_date == target for reservation in active)
    if is_checkout and is_checkin:
        return False

    return any(
        is_date_between(target, reservation.start_date, reservation.end_date)
        for reservation in active
    )


def daily_availability(
    reservations: Iterable[ReservationLike],
    *,
    apartment_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> list[dict[str, object]]:
    """Return availability per day for the requested range."""
    if start_date > end_date:
        raise ValueError("start_date must be before or equal to end_date")

    active = active_reservations(reservations, apartment_id)
    days: list[dict[str, object]] = []
    current = start_date
    while current <= end_date:
        booked = is_day_booked(active, apartment_id, current)
        days.append(
            {
                "date": current,
                "week_number": iso_week(current),
                "booked": booked,
                "available": not booked,
            }
        )
        current += timedelta(days=1)
    return days


class SelectionState(str, enum.Enum):
    """States of the two-click date range selection."""

    EMPTY = "empty"
    START_ONLY = "start-only"
    COMPLETE = "complete"


@dataclass(frozen=True, slots=True)
class DateRangeSelection:
    """Start/end picked on the calendar; each click returns a new selection."""

    start: date | None = None
    end: date | None = None

    @property
    def state(self) -> SelectionState:
        if self.start is None:
            return SelectionState.EMPTY
        if self.end is None:
            return SelectionState.START_ONLY
        return SelectionState.COMPLETE

    @property
    def is_complete(self) -> bool:
        return self.state == SelectionState.COMPLETE

    def select(self, day: DayLike) -> DateRangeSelection:
        """Advance the selection with a clicked day.

        A second click before the current start replaces the start instead of
        failing; a click on a complete selection starts over.
        """
        picked = normalize_day(day)
        state = self.state
        if state == SelectionState.START_ONLY and self.start is not None:
            if picked >= self.start:
                return DateRangeSelection(start=self.start, end=picked)
            return DateRangeSelection(start=picked)
        return DateRangeSelection(start=picked)

    def clear(self) -> DateRangeSelection:
        return DateRangeSelection()

    def contains(self, day: date) -> bool:
        if self.start is None:
            return False
        if self.end is None:
            return day == self.start
        return self.start <= day <= self.end


@dataclass(frozen=True, slots=True)
class CalendarDay:
    """One cell of the month grid."""

    date: date
    week_number: int
    is_booked: bool
    is_selected: bool
    is_today: bool


CalendarRow = list[CalendarDay | None]


def build_month_grid(
    year: int,
    month: int,
    *,
    reservations: Iterable[ReservationLike] = (),
    apartment_id: uuid.UUID | None = None,
    selection: DateRangeSelection | None = None,
    today: date | None = None,
) -> list[CalendarRow]:
    """Lay out a month as Monday-first rows of seven cells.

    Cells before the first of the month are ``None`` placeholders. The last
    row is not padded. ``today`` only marks a cell and has no other effect.
    """
    first = date(year, month, 1)
    _, days_in_month = calendar.monthrange(year, month)
    active = (
        active_reservations(reservations, apartment_id)
        if apartment_id is not None
        else []
    )
    selection = selection or DateRangeSelection()

    cells: list[CalendarDay | None] = [None] * (iso_weekday(first) - 1)
    for offset in range(days_in_month):
        day = first + timedelta(days=offset)
        cells.append(
            CalendarDay(
                date=day,
                week_number=iso_week(day),
                is_booked=bool(active)
                and apartment_id is not None
                and is_day_booked(active, apartment_id, day),
                is_selected=selection.contains(day),
                is_today=today is not None and day == today,
            )
        )

    return [cells[index : index + 7] for index in range(0, len(cells), 7)]


def previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


__all__ = [
    "CalendarDay",
    "DateRangeSelection",
    "ReservationLike",
    "SelectionState",
    "active_reservations",
    "build_month_grid",
    "daily_availability",
    "find_conflicts",
    "is_day_booked",
    "next_month",
    "previous_month",
    "ranges_overlap",
]
