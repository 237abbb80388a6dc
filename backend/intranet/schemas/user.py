"""User-related schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator

from intranet.models.user import UserRole, UserStatus

_EMAIL_ADAPTER = TypeAdapter(EmailStr)


def validate_member_email(value: str) -> str:
    """Validate an email address, allowing ``*.local`` addresses used on test setups."""

    email = value.strip()
    try:
        return _EMAIL_ADAPTER.validate_python(email)
    except ValueError:
        local_part, _, domain = email.partition("@")
        if local_part and domain.endswith(".local"):
            return email
        raise


class UserBase(BaseModel):
    """Shared user fields."""

    email: str
    full_name: str | None = None
    apartment: str | None = Field(default=None, max_length=64)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return validate_member_email(value)


class UserCreate(UserBase):
    """Payload for creating a user."""

    password: str = Field(min_length=8)
    role: UserRole = UserRole.MEMBER
    status: UserStatus = UserStatus.ACTIVE


class UserRead(UserBase):
    """Serialized user response."""

    id: uuid.UUID
    role: UserRole
    status: UserStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    """Mutable user fields."""

    full_name: str | None = None
    apartment: str | None = Field(default=None, max_length=64)
    role: UserRole | None = None
    status: UserStatus | None = None
    password: str | None = Field(default=None, min_length=8)
