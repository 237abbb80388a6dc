"""Availability rule tests: overlap, turnover days and rejected bookings."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date

import pytest

from intranet.models.booking import BookingStatus
from intranet.services import availability_service
from intranet.services.availability_service import ranges_overlap

APARTMENT = uuid.uuid4()
OTHER_APARTMENT = uuid.uuid4()


@dataclass
class _Reservation:
    start_date: date
    end_date: date
    apartment_id: uuid.UUID = APARTMENT
    status: BookingStatus = BookingStatus.CONFIRMED
    id: uuid.UUID = field(default_factory=uuid.uuid4)


def test_touching_ranges_do_not_overlap() -> None:
    assert not ranges_overlap("2025-06-10", "2025-06-12", "2025-06-12", "2025-06-15")
    assert not ranges_overlap("2025-06-12", "2025-06-15", "2025-06-10", "2025-06-12")


def test_contained_range_overlaps() -> None:
    assert ranges_overlap("2025-06-10", "2025-06-15", "2025-06-12", "2025-06-14")


@pytest.mark.parametrize(
    ("a", "b"),
    [
        (("2025-06-01", "2025-06-05"), ("2025-06-04", "2025-06-09")),
        (("2025-06-01", "2025-06-05"), ("2025-06-06", "2025-06-09")),
        (("2025-06-01", "2025-06-30"), ("2025-06-10", "2025-06-10")),
        (("2025-06-01", "2025-06-05"), ("2025-06-05", "2025-06-09")),
    ],
)
def test_overlap_is_symmetric(a: tuple[str, str], b: tuple[str, str]) -> None:
    assert ranges_overlap(*a, *b) == ranges_overlap(*b, *a)


def test_non_degenerate_range_overlaps_itself() -> None:
    assert ranges_overlap("2025-06-01", "2025-06-03", "2025-06-01", "2025-06-03")


def test_days_inside_a_booking_are_booked() -> None:
    reservations = [_Reservation(date(2025, 6, 10), date(2025, 6, 14))]
    for day in range(10, 15):
        assert availability_service.is_day_booked(
            reservations, APARTMENT, date(2025, 6, day)
        )
    assert not availability_service.is_day_booked(reservations, APARTMENT, date(2025, 6, 9))
    assert not availability_service.is_day_booked(
        reservations, APARTMENT, date(2025, 6, 15)
    )


def test_turnover_day_is_free() -> None:
    reservations = [
        _Reservation(date(2025, 6, 10), date(2025, 6, 12)),
        _Reservation(date(2025, 6, 12), date(2025, 6, 15)),
    ]
    assert not availability_service.is_day_booked(
        reservations, APARTMENT, "2025-06-12"
    )
    assert availability_service.is_day_booked(reservations, APARTMENT, "2025-06-11")
    assert availability_service.is_day_booked(reservations, APARTMENT, "2025-06-13")


def test_turnover_only_counts_bookings_of_the_same_apartment() -> None:
    reservations = [
        _Reservation(date(2025, 6, 10), date(2025, 6, 12)),
        _Reservation(date(2025, 6, 12), date(2025, 6, 15), apartment_id=OTHER_APARTMENT),
    ]
    assert availability_service.is_day_booked(reservations, APARTMENT, "2025-06-12")


def test_rejected_bookings_never_block() -> None:
    reservations = [
        _Reservation(date(2025, 6, 10), date(2025, 6, 14), status=BookingStatus.REJECTED)
    ]
    assert not availability_service.is_day_booked(reservations, APARTMENT, "2025-06-12")
    assert (
        availability_service.find_conflicts(
            reservations, apartment_id=APARTMENT, start="2025-06-11", end="2025-06-13"
        )
        == []
    )


def test_find_conflicts_reports_colliding_bookings() -> None:
    blocking = _Reservation(date(2025, 6, 10), date(2025, 6, 14))
    elsewhere = _Reservation(
        date(2025, 6, 10), date(2025, 6, 14), apartment_id=OTHER_APARTMENT
    )
    conflicts = availability_service.find_conflicts(
        [blocking, elsewhere], apartment_id=APARTMENT, start="2025-06-13", end="2025-06-16"
    )
    assert conflicts == [blocking]
    assert (
        availability_service.find_conflicts(
            [blocking],
            apartment_id=APARTMENT,
            start="2025-06-13",
            end="2025-06-16",
            exclude_id=blocking.id,
        )
        == []
    )


def test_daily_availability_lists_each_day() -> None:
    reservations = [_Reservation(date(2025, 6, 10), date(2025, 6, 11))]
    days = availability_service.daily_availability(
        reservations,
        apartment_id=APARTMENT,
        start_date=date(2025, 6, 9),
        end_date=date(2025, 6, 12),
    )
    assert [day["booked"] for day in days] == [False, True, True, False]
    assert all(day["available"] is not day["booked"] for day in days)
    assert days[0]["week_number"] == 24


def test_daily_availability_rejects_inverted_range() -> None:
    with pytest.raises(ValueError):
        availability_service.daily_availability(
            [],
            apartment_id=APARTMENT,
            start_date=date(2025, 6, 12),
            end_date=date(2025, 6, 9),
        )
