"""Guest apartment booking service helpers."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from intranet.models.apartment import Apartment
from intranet.models.booking import Booking, BookingStatus
from intranet.services import availability_service
from intranet.services.errors import (
    BookingConflictError,
    BookingValidationError,
    DataStoreError,
    InvalidStatusTransition,
    ReservationNotFoundError,
)

logger = logging.getLogger(__name__)

# Exclusion constraint added on PostgreSQL by the initial migration.
OVERLAP_CONSTRAINT = "ex_bookings_no_overlap"
_EXCLUSION_VIOLATION = "23P01"

_ALLOWED_STATUS_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.REJECTED},
    BookingStatus.CONFIRMED: {BookingStatus.REJECTED},
    BookingStatus.REJECTED: set(),
}


def _base_booking_query():
    return (
        select(Booking)
        .options(selectinload(Booking.user), selectinload(Booking.apartment))
        .execution_options(populate_existing=True)
        .order_by(Booking.start_date.asc(), Booking.created_at.asc())
    )


async def list_bookings(
    session: AsyncSession,
    *,
    apartment_id: uuid.UUID | None = None,
) -> Sequence[Booking]:
    """Return bookings ordered by start date, optionally for one apartment."""
    stmt = _base_booking_query()
    if apartment_id is not None:
        stmt = stmt.where(Booking.apartment_id == apartment_id)
    result = await session.execute(stmt)
    return result.scalars().unique().all()


async def get_booking(
    session: AsyncSession,
    *,
    booking_id: uuid.UUID,
) -> Booking | None:
    stmt = _base_booking_query().where(Booking.id == booking_id)
    result = await session.execute(stmt)
    return result.scalars().unique().one_or_none()


async def require_booking(session: AsyncSession, *, booking_id: uuid.UUID) -> Booking:
    booking = await get_booking(session, booking_id=booking_id)
    if booking is None:
        raise ReservationNotFoundError(f"Booking {booking_id} not found")
    return booking


async def _reload(session: AsyncSession, booking_id: uuid.UUID) -> Booking:
    try:
        return await require_booking(session, booking_id=booking_id)
    except ReservationNotFoundError as exc:
        raise DataStoreError(f"Booking {booking_id} vanished after commit") from exc


def _is_overlap_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "sqlstate", None) == _EXCLUSION_VIOLATION:
        return True
    return OVERLAP_CONSTRAINT in str(exc.orig)


async def _active_bookings_in_window(
    session: AsyncSession,
    *,
    apartment_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> Sequence[Booking]:
    result = await session.execute(
        select(Booking).where(
            Booking.apartment_id == apartment_id,
            Booking.status != BookingStatus.REJECTED,
            Booking.start_date <= end_date,
            Booking.end_date >= start_date,
        )
    )
    return result.scalars().all()


def validate_booking_request(
    *,
    apartment_id: uuid.UUID | None,
    start_date: date | None,
    end_date: date | None,
    guest_name: str | None,
) -> None:
    """Reject requests missing the apartment, either date or the guest name."""
    missing = []
    if apartment_id is None:
        missing.append("apartment")
    if start_date is None:
        missing.append("start date")
    if end_date is None:
        missing.append("end date")
    if not guest_name or not guest_name.strip():
        missing.append("guest name")
    if missing:
        raise BookingValidationError("Missing required fields: " + ", ".join(missing))
    if start_date > end_date:  # type: ignore[operator]
        raise BookingValidationError("Booking end date must not be before start date")


async def _validate_apartment(session: AsyncSession, apartment_id: uuid.UUID) -> Apartment:
    apartment = await session.get(Apartment, apartment_id)
    if apartment is None:
        raise BookingValidationError("Apartment not found")
    return apartment


async def ensure_dates_available(
    session: AsyncSession,
    *,
    apartment_id: uuid.UUID,
    start_date: date,
    end_date: date,
    exclude_booking_id: uuid.UUID | None = None,
) -> None:
    """Re-read the apartment's bookings and fail if the range collides."""
    existing = await _active_bookings_in_window(
        session, apartment_id=apartment_id, start_date=start_date, end_date=end_date
    )
    conflicts = availability_service.find_conflicts(
        existing,
        apartment_id=apartment_id,
        start=start_date,
        end=end_date,
        exclude_id=exclude_booking_id,
    )
    if conflicts:
        raise BookingConflictError(
            conflicting_ids=[booking.id for booking in conflicts],
            start_date=start_date,
            end_date=end_date,
        )


async def create_booking(
    session: AsyncSession,
    *,
    apartment_id: uuid.UUID,
    user_id: uuid.UUID,
    start_date: date,
    end_date: date,
    guest_name: str,
    phone_number: str | None = None,
    notes: str | None = None,
    status: BookingStatus = BookingStatus.CONFIRMED,
) -> Booking:
    """Persist a booking after checking the dates against fresh data."""
    validate_booking_request(
        apartment_id=apartment_id,
        start_date=start_date,
        end_date=end_date,
        guest_name=guest_name,
    )
    await _validate_apartment(session, apartment_id)
    await ensure_dates_available(
        session, apartment_id=apartment_id, start_date=start_date, end_date=end_date
    )

    booking = Booking(
        apartment_id=apartment_id,
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        status=status,
        guest_name=guest_name.strip(),
        phone_number=phone_number or None,
        notes=notes or None,
    )
    session.add(booking)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if not _is_overlap_violation(exc):
            raise
        logger.warning(
            "Booking insert rejected by the database for apartment %s (%s - %s)",
            apartment_id,
            start_date,
            end_date,
        )
        raise BookingConflictError(start_date=start_date, end_date=end_date) from exc
    logger.info(
        "Created booking %s for apartment %s (%s - %s)",
        booking.id,
        apartment_id,
        start_date,
        end_date,
    )
    return await _reload(session, booking.id)


def _validate_status_transition(current: BookingStatus, target: BookingStatus) -> None:
    if target == current:
        return
    allowed = _ALLOWED_STATUS_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidStatusTransition(
            f"Invalid status transition from {current.value} to {target.value}"
        )


async def update_booking_status(
    session: AsyncSession,
    *,
    booking: Booking,
    status: BookingStatus,
) -> Booking:
    _validate_status_transition(booking.status, status)
    if status == BookingStatus.CONFIRMED and booking.status != status:
        await ensure_dates_available(
            session,
            apartment_id=booking.apartment_id,
            start_date=booking.start_date,
            end_date=booking.end_date,
            exclude_booking_id=booking.id,
        )
    booking.status = status
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if not _is_overlap_violation(exc):
            raise
        raise BookingConflictError(
            start_date=booking.start_date, end_date=booking.end_date
        ) from exc
    return await _reload(session, booking.id)


async def delete_booking(session: AsyncSession, *, booking_id: uuid.UUID) -> bool:
    """Hard-delete a booking; returns False when it was already gone."""
    booking = await session.get(Booking, booking_id)
    if booking is None:
        logger.info("Booking %s not found, nothing to delete", booking_id)
        return False
    await session.delete(booking)
    await session.commit()
    logger.info("Deleted booking %s", booking_id)
    return True
