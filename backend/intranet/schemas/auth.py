"""Authentication schemas."""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from intranet.schemas.user import UserRead, validate_member_email


class Token(BaseModel):
    """Response body for access tokens."""

    access_token: str
    token_type: str = "bearer"


class RegistrationRequest(BaseModel):
    """Self-service registration payload for association members."""

    email: str
    password: str = Field(min_length=8)
    full_name: str | None = None
    apartment: str | None = Field(default=None, max_length=64)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return validate_member_email(value)


class RegistrationResponse(BaseModel):
    """Response after successful self-service registration."""

    token: Token
    user: UserRead
