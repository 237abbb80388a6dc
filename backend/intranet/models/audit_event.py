"""Audit trail for sign-ins, registrations and guest apartment bookings."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any, TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import DateTime, Enum, ForeignKey, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from intranet.db.base import Base

if TYPE_CHECKING:  # pragma: no cover
    from intranet.models.user import User


class AuditEventType(str, enum.Enum):
    """Actions recorded in the audit trail."""

    LOGIN = "auth.login"
    LOGIN_BLOCKED = "auth.login_blocked"
    REGISTER = "auth.register"
    BOOKING_CREATED = "booking.created"
    BOOKING_STATUS_CHANGED = "booking.status_changed"
    BOOKING_CANCELLED = "booking.cancelled"


class AuditEvent(Base):
    """One immutable audit record.

    ``booking_id`` is a plain column rather than a foreign key: cancelled
    bookings are hard-deleted and their trail must outlive them.
    """

    __tablename__ = "audit_events"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    event_type: Mapped[AuditEventType] = mapped_column(
        Enum(
            AuditEventType,
            native_enum=False,
            length=120,
            values_callable=lambda kinds: [kind.value for kind in kinds],
        ),
        nullable=False,
    )
    booking_id: Mapped[uuid.UUID | None] = mapped_column(index=True)
    description: Mapped[str | None] = mapped_column(String(1024))
    payload: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    ip_address: Mapped[str | None] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=sa.func.now()
    )

    user: Mapped["User | None"] = relationship("User")
