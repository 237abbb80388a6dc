"""Bookable guest apartment model."""
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from intranet.db.base import Base
from intranet.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from intranet.models.booking import Booking


class Apartment(TimestampMixin, Base):
    """A guest apartment members can reserve for visitors."""

    __tablename__ = "apartments"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    price_per_night: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="apartment", cascade="all, delete-orphan"
    )
