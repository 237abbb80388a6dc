"""Guest apartment booking API."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.api import deps
from intranet.models.audit_event import AuditEventType
from intranet.models.booking import Booking
from intranet.models.user import User, UserRole
from intranet.schemas.booking import (
    AvailabilityResponse,
    BookingCreate,
    BookingRead,
    BookingStatusUpdate,
    CalendarMonthResponse,
    DayAvailabilityRead,
    MonthRef,
    QuoteRead,
    SelectionRead,
)
from intranet.services import (
    apartment_service,
    audit_service,
    availability_service,
    booking_service,
    season_service,
)
from intranet.services.availability_service import DateRangeSelection
from intranet.services.booking_calendar import BookingCalendar, GuestInfo
from intranet.services.booking_store import SqlBookingStore
from intranet.services.errors import (
    BookingConflictError,
    BookingValidationError,
    DataStoreError,
    InvalidStatusTransition,
    ReservationNotFoundError,
)
from intranet.services.season_service import SeasonPriceResolver

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_AVAILABILITY_DAYS = 366


def _conflict(exc: BookingConflictError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


def _unavailable(exc: DataStoreError) -> HTTPException:
    logger.error("Data store failure: %s", exc)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="The booking service is temporarily unavailable",
    )


async def _load_calendar(
    session: AsyncSession, user: User, apartment_id: uuid.UUID
) -> BookingCalendar:
    calendar = BookingCalendar(SqlBookingStore(session, user), apartment_id)
    try:
        await calendar.refresh()
    except DataStoreError as exc:
        raise _unavailable(exc) from exc
    if calendar.apartment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Apartment not found"
        )
    return calendar


async def _resolvers_for(
    session: AsyncSession, bookings: Sequence[Booking]
) -> dict[uuid.UUID, SeasonPriceResolver]:
    tables = await season_service.list_season_settings(session)
    assignments = season_service.flatten_assignments(tables)
    resolvers: dict[uuid.UUID, SeasonPriceResolver] = {}
    for booking in bookings:
        if booking.apartment_id in resolvers:
            continue
        base_price = booking.apartment.price_per_night if booking.apartment else 0
        resolvers[booking.apartment_id] = SeasonPriceResolver(
            tables, assignments, base_price=base_price
        )
    return resolvers


def _serialize(
    booking: Booking, resolver: SeasonPriceResolver | None
) -> BookingRead:
    total = (
        resolver.total_price(booking.start_date, booking.end_date)
        if resolver is not None
        else None
    )
    return BookingRead.from_booking(booking, total_price=total)


def _assert_can_manage(user: User, booking: Booking) -> None:
    if user.role != UserRole.ADMIN and booking.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the requester or an administrator can cancel this booking",
        )


def _not_found(exc: ReservationNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _check_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must not be before start_date",
        )


@router.get("", response_model=list[BookingRead], summary="List bookings")
async def list_bookings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
    apartment_id: uuid.UUID | None = None,
) -> list[BookingRead]:
    """Return every booking ordered by start date."""
    bookings = await booking_service.list_bookings(session, apartment_id=apartment_id)
    resolvers = await _resolvers_for(session, bookings)
    return [_serialize(obj, resolvers.get(obj.apartment_id)) for obj in bookings]


@router.get(
    "/calendar", response_model=CalendarMonthResponse, summary="Month calendar"
)
async def month_calendar(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    apartment_id: uuid.UUID,
    year: Annotated[int | None, Query(ge=1970, le=9999)] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
    start: date | None = None,
    end: date | None = None,
) -> CalendarMonthResponse:
    """Render a month grid; ``start``/``end`` replay two calendar clicks."""
    today = date.today()
    year = year or today.year
    month = month or today.month
    calendar = await _load_calendar(session, current_user, apartment_id)
    for clicked in (start, end):
        if clicked is not None:
            calendar.select_day(clicked)

    quote = calendar.quote_selection()
    prev_year, prev_month = availability_service.previous_month(year, month)
    next_year, next_month = availability_service.next_month(year, month)
    return CalendarMonthResponse(
        apartment_id=apartment_id,
        year=year,
        month=month,
        previous=MonthRef(year=prev_year, month=prev_month),
        next=MonthRef(year=next_year, month=next_month),
        weeks=CalendarMonthResponse.serialize_rows(
            calendar.month_grid(year, month, today=today)
        ),
        selection=SelectionRead.from_selection(calendar.selection),
        quote=QuoteRead.from_quote(quote) if quote is not None else None,
    )


@router.get(
    "/availability",
    response_model=AvailabilityResponse,
    summary="Daily availability",
)
async def availability(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
    apartment_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> AvailabilityResponse:
    _check_range(start_date, end_date)
    if (end_date - start_date).days + 1 > MAX_AVAILABILITY_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Availability is limited to {MAX_AVAILABILITY_DAYS} days per request",
        )
    apartment = await apartment_service.get_apartment(session, apartment_id=apartment_id)
    if apartment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Apartment not found"
        )
    bookings = await booking_service.list_bookings(session, apartment_id=apartment_id)
    days = availability_service.daily_availability(
        bookings, apartment_id=apartment_id, start_date=start_date, end_date=end_date
    )
    return AvailabilityResponse(
        apartment_id=apartment_id,
        start_date=start_date,
        end_date=end_date,
        days=[DayAvailabilityRead(**day) for day in days],
    )


@router.get("/quote", response_model=QuoteRead, summary="Price a stay")
async def quote_stay(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
    apartment_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> QuoteRead:
    """Nightly prices for ``[start_date, end_date)``."""
    _check_range(start_date, end_date)
    apartment = await apartment_service.get_apartment(session, apartment_id=apartment_id)
    if apartment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Apartment not found"
        )
    resolver = await season_service.build_resolver(
        session, base_price=apartment.price_per_night
    )
    return QuoteRead.from_quote(resolver.quote(start_date, end_date))


@router.post(
    "",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Book the guest apartment",
)
async def create_booking(
    payload: BookingCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    request: Request,
) -> BookingRead:
    """Book a date range; the range is re-checked against fresh data first."""
    calendar = await _load_calendar(session, current_user, payload.apartment_id)
    guest = GuestInfo(
        guest_name=payload.guest_name,
        phone_number=payload.phone_number,
        notes=payload.notes,
    )
    try:
        booking = await calendar.confirm_booking(
            guest,
            DateRangeSelection(start=payload.start_date, end=payload.end_date),
        )
    except BookingConflictError as exc:
        raise _conflict(exc) from exc
    except BookingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except DataStoreError as exc:
        raise _unavailable(exc) from exc

    await audit_service.record_event(
        session,
        user_id=current_user.id,
        event_type=AuditEventType.BOOKING_CREATED,
        booking_id=booking.id,
        description="Guest apartment booked",
        payload={
            "booking_id": str(booking.id),
            "apartment_id": str(booking.apartment_id),
            "start_date": booking.start_date.isoformat(),
            "end_date": booking.end_date.isoformat(),
        },
        ip_address=request.client.host if request.client else None,
    )
    return _serialize(booking, calendar.resolver)


@router.get("/{booking_id}", response_model=BookingRead, summary="Get booking")
async def read_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
) -> BookingRead:
    try:
        booking = await booking_service.require_booking(session, booking_id=booking_id)
    except ReservationNotFoundError as exc:
        raise _not_found(exc) from exc
    resolvers = await _resolvers_for(session, [booking])
    return _serialize(booking, resolvers.get(booking.apartment_id))


@router.patch(
    "/{booking_id}/status", response_model=BookingRead, summary="Change booking status"
)
async def update_booking_status(
    booking_id: uuid.UUID,
    payload: BookingStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_admin)],
) -> BookingRead:
    try:
        booking = await booking_service.require_booking(session, booking_id=booking_id)
    except ReservationNotFoundError as exc:
        raise _not_found(exc) from exc
    try:
        updated = await booking_service.update_booking_status(
            session, booking=booking, status=payload.status
        )
    except BookingConflictError as exc:
        raise _conflict(exc) from exc
    except InvalidStatusTransition as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except DataStoreError as exc:
        raise _unavailable(exc) from exc
    await audit_service.record_event(
        session,
        user_id=current_user.id,
        event_type=AuditEventType.BOOKING_STATUS_CHANGED,
        booking_id=booking_id,
        payload={"status": payload.status.value},
    )
    resolvers = await _resolvers_for(session, [updated])
    return _serialize(updated, resolvers.get(updated.apartment_id))


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel booking",
)
async def cancel_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> None:
    """Cancel a booking; cancelling one that is already gone succeeds."""
    try:
        booking = await booking_service.require_booking(session, booking_id=booking_id)
    except ReservationNotFoundError:
        return None
    _assert_can_manage(current_user, booking)
    apartment_id = booking.apartment_id
    calendar = BookingCalendar(SqlBookingStore(session, current_user), apartment_id)
    try:
        deleted = await calendar.cancel_reservation(booking_id)
    except DataStoreError as exc:
        raise _unavailable(exc) from exc
    if deleted:
        await audit_service.record_event(
            session,
            user_id=current_user.id,
            event_type=AuditEventType.BOOKING_CANCELLED,
            booking_id=booking_id,
            payload={"apartment_id": str(apartment_id)},
        )
    return None
