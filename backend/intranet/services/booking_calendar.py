"""Screen-scoped booking calendar for one guest apartment.

A ``BookingCalendar`` owns the reservation list and season data it loaded
from its ``BookingStore`` plus the user's in-progress date selection. Every
mutation goes through the store and is followed by a full reload instead of
patching the in-memory lists.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date

from intranet.models.apartment import Apartment
from intranet.models.booking import Booking
from intranet.services import availability_service
from intranet.services.availability_service import (
    CalendarRow,
    DateRangeSelection,
    DayLike,
)
from intranet.services.booking_service import validate_booking_request
from intranet.services.booking_store import BookingStore
from intranet.services.errors import (
    BookingConflictError,
    BookingValidationError,
    DataStoreError,
)
from intranet.services.season_service import SeasonPriceResolver, StayQuote

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GuestInfo:
    """Details collected by the booking form."""

    guest_name: str
    phone_number: str | None = None
    notes: str | None = None


class BookingCalendar:
    """Availability, selection and booking flow for a single apartment."""

    def __init__(self, store: BookingStore, apartment_id: uuid.UUID) -> None:
        self._store = store
        self.apartment_id = apartment_id
        self.apartment: Apartment | None = None
        self.reservations: list[Booking] = []
        self.resolver: SeasonPriceResolver | None = None
        self.selection = DateRangeSelection()

    async def refresh(self) -> None:
        """Reload the apartment, its reservations and the season data.

        State is only replaced once every read succeeded.
        """
        apartment = await self._store.get_apartment(self.apartment_id)
        reservations = await self._store.list_reservations(self.apartment_id)
        tables = await self._store.list_season_tables()
        assignments = await self._store.list_season_week_assignments()

        self.apartment = apartment
        self.reservations = list(reservations)
        self.resolver = SeasonPriceResolver(
            tables,
            assignments,
            base_price=apartment.price_per_night if apartment is not None else 0,
        )

    def is_day_booked(self, day: DayLike) -> bool:
        return availability_service.is_day_booked(
            self.reservations, self.apartment_id, day
        )

    def select_day(self, day: DayLike) -> DateRangeSelection:
        """Feed a calendar click into the selection; booked days are ignored."""
        if self.is_day_booked(day):
            return self.selection
        self.selection = self.selection.select(day)
        return self.selection

    def clear_selection(self) -> None:
        self.selection = self.selection.clear()

    def month_grid(self, year: int, month: int, *, today: date | None = None) -> list[CalendarRow]:
        return availability_service.build_month_grid(
            year,
            month,
            reservations=self.reservations,
            apartment_id=self.apartment_id,
            selection=self.selection,
            today=today,
        )

    def quote(self, start: DayLike, end: DayLike) -> StayQuote:
        if self.resolver is None:
            raise RuntimeError("Calendar has not been loaded; call refresh() first")
        return self.resolver.quote(start, end)

    def quote_selection(self) -> StayQuote | None:
        if not self.selection.is_complete:
            return None
        return self.quote(self.selection.start, self.selection.end)  # type: ignore[arg-type]

    async def confirm_booking(
        self,
        guest: GuestInfo,
        selection: DateRangeSelection | None = None,
    ) -> Booking:
        """Book the selected range for the current user.

        The range is re-checked against freshly loaded reservations before the
        insert. On conflict or failure the selection is left as it was so the
        user can adjust the dates; on success it is cleared.
        """
        selection = selection or self.selection
        validate_booking_request(
            apartment_id=self.apartment_id,
            start_date=selection.start,
            end_date=selection.end,
            guest_name=guest.guest_name,
        )
        user = await self._store.current_user()
        if user is None:
            raise BookingValidationError("You must be signed in to book")

        fresh = await self._store.list_reservations(self.apartment_id)
        conflicts = availability_service.find_conflicts(
            fresh,
            apartment_id=self.apartment_id,
            start=selection.start,  # type: ignore[arg-type]
            end=selection.end,  # type: ignore[arg-type]
        )
        if conflicts:
            self.reservations = list(fresh)
            raise BookingConflictError(
                conflicting_ids=[booking.id for booking in conflicts],
                start_date=selection.start,
                end_date=selection.end,
            )

        booking = await self._store.insert_reservation(
            apartment_id=self.apartment_id,
            requester_id=user.id,
            start_date=selection.start,  # type: ignore[arg-type]
            end_date=selection.end,  # type: ignore[arg-type]
            guest_name=guest.guest_name,
            phone_number=guest.phone_number,
            notes=guest.notes,
        )
        self.selection = DateRangeSelection()
        try:
            await self.refresh()
        except DataStoreError:
            logger.warning("Booking %s saved but calendar reload failed", booking.id)
        return booking

    async def cancel_reservation(self, booking_id: uuid.UUID) -> bool:
        """Delete a reservation; an id that no longer exists is not an error."""
        deleted = await self._store.delete_reservation(booking_id)
        if not deleted:
            logger.info("Booking %s already cancelled", booking_id)
        try:
            await self.refresh()
        except DataStoreError:
            logger.warning("Booking %s cancelled but calendar reload failed", booking_id)
            self.reservations = [
                reservation
                for reservation in self.reservations
                if reservation.id != booking_id
            ]
        return deleted


__all__ = ["BookingCalendar", "GuestInfo"]
