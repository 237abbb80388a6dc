"""Persistence collaborator used by the booking calendar."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.models.apartment import Apartment
from intranet.models.booking import Booking
from intranet.models.season import SeasonSetting
from intranet.models.user import User
from intranet.services import booking_service, season_service
from intranet.services.errors import DataStoreError
from intranet.services.season_service import SeasonWeekAssignment

logger = logging.getLogger(__name__)


class BookingStore(Protocol):
    """Everything the booking calendar needs from the data store."""

    async def get_apartment(self, apartment_id: uuid.UUID) -> Apartment | None: ...

    async def list_reservations(
        self, apartment_id: uuid.UUID | None = None
    ) -> Sequence[Booking]: ...

    async def insert_reservation(
        self,
        *,
        apartment_id: uuid.UUID,
        requester_id: uuid.UUID,
        start_date: date,
        end_date: date,
        guest_name: str,
        phone_number: str | None = None,
        notes: str | None = None,
    ) -> Booking: ...

    async def delete_reservation(self, booking_id: uuid.UUID) -> bool: ...

    async def list_season_tables(self) -> Sequence[SeasonSetting]: ...

    async def upsert_season_table(
        self,
        *,
        year: int,
        low_season_price: int,
        high_season_price: int,
        tennis_season_price: int,
    ) -> SeasonSetting: ...

    async def list_season_week_assignments(self) -> list[SeasonWeekAssignment]: ...

    async def current_user(self) -> User | None: ...


class SqlBookingStore:
    """``BookingStore`` backed by an async SQLAlchemy session.

    Driver and SQL failures surface as ``DataStoreError``; domain errors from
    the service layer (conflicts, validation) pass through untouched.
    """

    def __init__(self, session: AsyncSession, user: User | None = None) -> None:
        self._session = session
        self._user = user

    async def _rollback(self) -> None:
        try:
            await self._session.rollback()
        except SQLAlchemyError:  # pragma: no cover - connection already gone
            logger.exception("Rollback after data store failure failed")

    async def get_apartment(self, apartment_id: uuid.UUID) -> Apartment | None:
        try:
            return await self._session.get(Apartment, apartment_id)
        except SQLAlchemyError as exc:
            await self._rollback()
            raise DataStoreError("Could not load apartment") from exc

    async def list_reservations(
        self, apartment_id: uuid.UUID | None = None
    ) -> Sequence[Booking]:
        try:
            return await booking_service.list_bookings(
                self._session, apartment_id=apartment_id
            )
        except SQLAlchemyError as exc:
            await self._rollback()
            raise DataStoreError("Could not load bookings") from exc

    async def insert_reservation(
        self,
        *,
        apartment_id: uuid.UUID,
        requester_id: uuid.UUID,
        start_date: date,
        end_date: date,
        guest_name: str,
        phone_number: str | None = None,
        notes: str | None = None,
    ) -> Booking:
        try:
            return await booking_service.create_booking(
                self._session,
                apartment_id=apartment_id,
                user_id=requester_id,
                start_date=start_date,
                end_date=end_date,
                guest_name=guest_name,
                phone_number=phone_number,
                notes=notes,
            )
        except SQLAlchemyError as exc:
            await self._rollback()
            raise DataStoreError("Could not save booking") from exc

    async def delete_reservation(self, booking_id: uuid.UUID) -> bool:
        try:
            return await booking_service.delete_booking(
                self._session, booking_id=booking_id
            )
        except SQLAlchemyError as exc:
            await self._rollback()
            raise DataStoreError("Could not delete booking") from exc

    async def list_season_tables(self) -> Sequence[SeasonSetting]:
        try:
            return await season_service.list_season_settings(self._session)
        except SQLAlchemyError as exc:
            await self._rollback()
            raise DataStoreError("Could not load season settings") from exc

    async def upsert_season_table(
        self,
        *,
        year: int,
        low_season_price: int,
        high_season_price: int,
        tennis_season_price: int,
    ) -> SeasonSetting:
        try:
            return await season_service.upsert_season_setting(
                self._session,
                year=year,
                low_season_price=low_season_price,
                high_season_price=high_season_price,
                tennis_season_price=tennis_season_price,
            )
        except SQLAlchemyError as exc:
            await self._rollback()
            raise DataStoreError("Could not save season settings") from exc

    async def list_season_week_assignments(self) -> list[SeasonWeekAssignment]:
        try:
            return await season_service.list_week_assignments(self._session)
        except SQLAlchemyError as exc:
            await self._rollback()
            raise DataStoreError("Could not load season weeks") from exc

    async def current_user(self) -> User | None:
        return self._user


__all__ = ["BookingStore", "SqlBookingStore"]
