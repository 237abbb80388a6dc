"""Guest apartment schemas."""
from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field


class ApartmentBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price_per_night: int = Field(default=0, ge=0)
    max_guests: int = Field(default=1, ge=1)


class ApartmentCreate(ApartmentBase):
    """Payload for registering a guest apartment."""


class ApartmentUpdate(BaseModel):
    """Mutable apartment fields."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price_per_night: int | None = Field(default=None, ge=0)
    max_guests: int | None = Field(default=None, ge=1)


class ApartmentRead(ApartmentBase):
    id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)
