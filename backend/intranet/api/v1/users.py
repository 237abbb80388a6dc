"""User management endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.api import deps
from intranet.models.user import User
from intranet.schemas.user import UserCreate, UserRead, UserUpdate
from intranet.services import user_service

router = APIRouter()


async def _get_user_or_404(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await user_service.get_user(session, user_id=user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )
    return user


@router.get("/me", response_model=UserRead, summary="Current user profile")
async def read_current_user(
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> UserRead:
    """Return the authenticated user's profile."""
    return UserRead.model_validate(current_user)


@router.get("", response_model=list[UserRead], summary="List users")
async def list_users(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
    search: Annotated[str | None, Query(max_length=255)] = None,
) -> list[UserRead]:
    """Return all members, optionally filtered by email, name or apartment."""
    users = await user_service.list_users(session, search=search)
    return [UserRead.model_validate(obj) for obj in users]


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    payload: UserCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> UserRead:
    try:
        user = await user_service.create_user(session, payload)
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use"
        ) from exc
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead, summary="Get user by ID")
async def read_user(
    user_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> UserRead:
    user = await _get_user_or_404(session, user_id)
    return UserRead.model_validate(user)


@router.patch("/{user_id}", response_model=UserRead, summary="Update user")
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_admin)],
) -> UserRead:
    """Update a member's profile, role or status."""
    user = await _get_user_or_404(session, user_id)
    if (
        user.id == current_user.id
        and payload.role is not None
        and payload.role != current_user.role
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot change your own role",
        )
    updated = await user_service.update_user(session, user, payload)
    return UserRead.model_validate(updated)


@router.delete(
    "/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete user"
)
async def delete_user(
    user_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_admin)],
) -> None:
    """Remove a member together with their bookings."""
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )
    user = await _get_user_or_404(session, user_id)
    await user_service.delete_user(session, user)
    return None
