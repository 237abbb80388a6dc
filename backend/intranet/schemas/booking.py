"""Pydantic schemas for guest apartment bookings."""
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from intranet.models.booking import Booking, BookingStatus
from intranet.models.season import SeasonType
from intranet.services.availability_service import (
    CalendarDay,
    DateRangeSelection,
    SelectionState,
)
from intranet.services.season_service import StayQuote


class BookingBase(BaseModel):
    """Shared booking fields."""

    apartment_id: uuid.UUID
    start_date: date
    end_date: date
    guest_name: str = Field(min_length=1, max_length=255)
    phone_number: str | None = Field(default=None, max_length=32)
    notes: str | None = Field(default=None, max_length=1024)


class BookingCreate(BookingBase):
    """Payload for booking a date range for a guest."""


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingRead(BookingBase):
    """Serialized booking with requester and apartment details."""

    id: uuid.UUID
    user_id: uuid.UUID
    status: BookingStatus
    created_at: datetime
    user_email: str | None = None
    user_full_name: str | None = None
    apartment_name: str | None = None
    total_price: int | None = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_booking(cls, booking: Booking, *, total_price: int | None = None) -> "BookingRead":
        read = cls.model_validate(booking)
        user = booking.user
        apartment = booking.apartment
        return read.model_copy(
            update={
                "user_email": user.email if user is not None else None,
                "user_full_name": user.full_name if user is not None else None,
                "apartment_name": apartment.name if apartment is not None else None,
                "total_price": total_price,
            }
        )


class DayAvailabilityRead(BaseModel):
    date: date
    week_number: int
    booked: bool
    available: bool


class AvailabilityResponse(BaseModel):
    """Day-by-day availability of an apartment."""

    apartment_id: uuid.UUID
    start_date: date
    end_date: date
    days: list[DayAvailabilityRead]


class NightPriceRead(BaseModel):
    date: date
    week_number: int
    season: SeasonType | None = None
    price: int

    model_config = ConfigDict(from_attributes=True)


class QuoteRead(BaseModel):
    """Price breakdown for a stay; the checkout day is not charged."""

    start_date: date
    end_date: date
    night_count: int
    total: int
    nights: list[NightPriceRead]

    @classmethod
    def from_quote(cls, quote: StayQuote) -> "QuoteRead":
        return cls(
            start_date=quote.start_date,
            end_date=quote.end_date,
            night_count=quote.night_count,
            total=quote.total,
            nights=[NightPriceRead.model_validate(night) for night in quote.nights],
        )


class SelectionRead(BaseModel):
    start: date | None = None
    end: date | None = None
    state: SelectionState

    @classmethod
    def from_selection(cls, selection: DateRangeSelection) -> "SelectionRead":
        return cls(start=selection.start, end=selection.end, state=selection.state)


class CalendarDayRead(BaseModel):
    date: date
    week_number: int
    is_booked: bool
    is_selected: bool
    is_today: bool

    model_config = ConfigDict(from_attributes=True)


class MonthRef(BaseModel):
    year: int
    month: int


class CalendarMonthResponse(BaseModel):
    """Month grid for one apartment with the optional selection applied."""

    apartment_id: uuid.UUID
    year: int
    month: int
    previous: MonthRef
    next: MonthRef
    weeks: list[list[CalendarDayRead | None]]
    selection: SelectionRead
    quote: QuoteRead | None = None

    @staticmethod
    def serialize_rows(
        rows: list[list[CalendarDay | None]],
    ) -> list[list[CalendarDayRead | None]]:
        return [
            [CalendarDayRead.model_validate(cell) if cell is not None else None for cell in row]
            for row in rows
        ]
