"""Guest apartment management services."""
from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.models.apartment import Apartment
from intranet.schemas.apartment import ApartmentCreate, ApartmentUpdate


async def list_apartments(session: AsyncSession) -> Sequence[Apartment]:
    result = await session.execute(select(Apartment).order_by(Apartment.name))
    return result.scalars().all()


async def get_apartment(
    session: AsyncSession, *, apartment_id: uuid.UUID
) -> Apartment | None:
    return await session.get(Apartment, apartment_id)


async def create_apartment(session: AsyncSession, payload: ApartmentCreate) -> Apartment:
    """Create a bookable guest apartment."""
    apartment = Apartment(**payload.model_dump())
    session.add(apartment)
    await session.commit()
    await session.refresh(apartment)
    return apartment


async def update_apartment(
    session: AsyncSession, *, apartment: Apartment, payload: ApartmentUpdate
) -> Apartment:
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(apartment, field, value)
    await session.commit()
    await session.refresh(apartment)
    return apartment
