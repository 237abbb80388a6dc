"""Booking and season services against a real SQLite session."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from intranet.db.session import get_sessionmaker
from intranet.models import BookingStatus, SeasonType
from intranet.services import booking_service, season_service
from intranet.services.booking_store import SqlBookingStore
from intranet.services.errors import (
    BookingConflictError,
    BookingValidationError,
    DataStoreError,
    DuplicateSeasonYearError,
    InvalidStatusTransition,
    ReservationNotFoundError,
)

pytestmark = pytest.mark.asyncio


async def _book(session, ctx: dict[str, Any], start: date, end: date, **extra: Any):
    return await booking_service.create_booking(
        session,
        apartment_id=ctx["apartment_id"],
        user_id=ctx["member_id"],
        start_date=start,
        end_date=end,
        guest_name="Gäst",
        **extra,
    )


async def test_create_booking_rejects_overlap(app_context: dict[str, Any]) -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        first = await _book(session, app_context, date(2025, 6, 10), date(2025, 6, 12))
        assert first.status == BookingStatus.CONFIRMED
        assert first.user.email == app_context["member_email"]

        with pytest.raises(BookingConflictError) as excinfo:
            await _book(session, app_context, date(2025, 6, 11), date(2025, 6, 14))
        assert excinfo.value.conflicting_ids == [first.id]

        turnover = await _book(session, app_context, date(2025, 6, 12), date(2025, 6, 14))
        bookings = await booking_service.list_bookings(
            session, apartment_id=app_context["apartment_id"]
        )
        assert [b.id for b in bookings] == [first.id, turnover.id]


async def test_create_booking_validates_request(app_context: dict[str, Any]) -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        with pytest.raises(BookingValidationError):
            await _book(session, app_context, date(2025, 6, 12), date(2025, 6, 10))
        with pytest.raises(BookingValidationError, match="guest name"):
            await booking_service.create_booking(
                session,
                apartment_id=app_context["apartment_id"],
                user_id=app_context["member_id"],
                start_date=date(2025, 6, 10),
                end_date=date(2025, 6, 11),
                guest_name="",
            )


async def test_rejected_booking_frees_the_dates(app_context: dict[str, Any]) -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        booking = await _book(session, app_context, date(2025, 8, 1), date(2025, 8, 5))
        rejected = await booking_service.update_booking_status(
            session, booking=booking, status=BookingStatus.REJECTED
        )
        assert rejected.status == BookingStatus.REJECTED

        replacement = await _book(session, app_context, date(2025, 8, 2), date(2025, 8, 4))
        assert replacement.id != booking.id

        with pytest.raises(InvalidStatusTransition):
            await booking_service.update_booking_status(
                session, booking=rejected, status=BookingStatus.CONFIRMED
            )


async def test_pending_booking_confirmation_rechecks_conflicts(
    app_context: dict[str, Any],
) -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        pending = await _book(
            session,
            app_context,
            date(2025, 9, 1),
            date(2025, 9, 3),
            status=BookingStatus.PENDING,
        )
        await booking_service.update_booking_status(
            session, booking=pending, status=BookingStatus.CONFIRMED
        )
        with pytest.raises(BookingConflictError):
            await booking_service.ensure_dates_available(
                session,
                apartment_id=app_context["apartment_id"],
                start_date=date(2025, 9, 2),
                end_date=date(2025, 9, 4),
            )


async def test_delete_booking_is_idempotent(app_context: dict[str, Any]) -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        booking = await _book(session, app_context, date(2025, 6, 1), date(2025, 6, 2))
        assert await booking_service.delete_booking(session, booking_id=booking.id)
        assert not await booking_service.delete_booking(session, booking_id=booking.id)
        assert await booking_service.list_bookings(session) == []

        with pytest.raises(ReservationNotFoundError):
            await booking_service.require_booking(session, booking_id=booking.id)


async def test_season_settings_and_weeks(app_context: dict[str, Any]) -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        setting = await season_service.create_season_setting(
            session,
            year=2025,
            low_season_price=300,
            high_season_price=600,
            tennis_season_price=900,
        )
        with pytest.raises(DuplicateSeasonYearError):
            await season_service.create_season_setting(
                session,
                year=2025,
                low_season_price=1,
                high_season_price=1,
                tennis_season_price=1,
            )

        setting = await season_service.set_season_weeks(
            session,
            setting=setting,
            weeks={24: SeasonType.HIGH, 28: SeasonType.TENNIS, 30: SeasonType.LOW},
        )
        assert [(w.week_number, w.season_type) for w in setting.weeks] == [
            (24, SeasonType.HIGH),
            (28, SeasonType.TENNIS),
        ]

        with pytest.raises(ValueError):
            await season_service.set_season_weeks(
                session, setting=setting, weeks={53: SeasonType.HIGH}
            )

        resolver = await season_service.build_resolver(session, base_price=400)
        assert resolver.total_price(date(2025, 6, 10), date(2025, 6, 12)) == 1200
        assert resolver.total_price(date(2026, 6, 10), date(2026, 6, 12)) == 800


async def test_sql_store_upserts_season_tables(app_context: dict[str, Any]) -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        store = SqlBookingStore(session)
        created = await store.upsert_season_table(
            year=2026, low_season_price=100, high_season_price=200, tennis_season_price=300
        )
        updated = await store.upsert_season_table(
            year=2026, low_season_price=150, high_season_price=250, tennis_season_price=350
        )
        assert created.id == updated.id
        assert updated.low_season_price == 150
        assert [table.year for table in await store.list_season_tables()] == [2026]
        assert await store.current_user() is None


async def test_sql_store_wraps_database_failures(
    app_context: dict[str, Any], monkeypatch: pytest.MonkeyPatch
) -> None:
    async def _broken(*_: Any, **__: Any):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(booking_service, "list_bookings", _broken)
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        store = SqlBookingStore(session)
        with pytest.raises(DataStoreError):
            await store.list_reservations(app_context["apartment_id"])


async def test_unknown_requester_is_a_store_failure_not_a_conflict(
    app_context: dict[str, Any],
) -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        store = SqlBookingStore(session)
        with pytest.raises(DataStoreError) as excinfo:
            await store.insert_reservation(
                apartment_id=app_context["apartment_id"],
                requester_id=uuid.uuid4(),
                start_date=date(2025, 10, 1),
                end_date=date(2025, 10, 3),
                guest_name="Gäst",
            )
        assert isinstance(excinfo.value.__cause__, IntegrityError)
        assert await booking_service.list_bookings(session) == []


async def test_only_the_overlap_constraint_counts_as_a_conflict() -> None:
    overlap = IntegrityError(
        "INSERT INTO bookings",
        {},
        Exception(
            'conflicting key value violates exclusion constraint "ex_bookings_no_overlap"'
        ),
    )
    foreign_key = IntegrityError(
        "INSERT INTO bookings", {}, Exception("FOREIGN KEY constraint failed")
    )
    assert booking_service._is_overlap_violation(overlap)
    assert not booking_service._is_overlap_violation(foreign_key)
