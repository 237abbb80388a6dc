"""Guest apartment endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.api import deps
from intranet.models.user import User
from intranet.schemas.apartment import ApartmentCreate, ApartmentRead, ApartmentUpdate
from intranet.services import apartment_service

router = APIRouter()


@router.get("", response_model=list[ApartmentRead], summary="List guest apartments")
async def list_apartments(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
) -> list[ApartmentRead]:
    apartments = await apartment_service.list_apartments(session)
    return [ApartmentRead.model_validate(obj) for obj in apartments]


@router.post(
    "",
    response_model=ApartmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create guest apartment",
)
async def create_apartment(
    payload: ApartmentCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> ApartmentRead:
    apartment = await apartment_service.create_apartment(session, payload)
    return ApartmentRead.model_validate(apartment)


@router.get("/{apartment_id}", response_model=ApartmentRead, summary="Get apartment")
async def read_apartment(
    apartment_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
) -> ApartmentRead:
    apartment = await apartment_service.get_apartment(session, apartment_id=apartment_id)
    if apartment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Apartment not found"
        )
    return ApartmentRead.model_validate(apartment)


@router.patch(
    "/{apartment_id}", response_model=ApartmentRead, summary="Update apartment"
)
async def update_apartment(
    apartment_id: uuid.UUID,
    payload: ApartmentUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> ApartmentRead:
    apartment = await apartment_service.get_apartment(session, apartment_id=apartment_id)
    if apartment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Apartment not found"
        )
    updated = await apartment_service.update_apartment(
        session, apartment=apartment, payload=payload
    )
    return ApartmentRead.model_validate(updated)
