"""Helper utilities for recording audit events."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.models.audit_event import AuditEvent, AuditEventType

logger = logging.getLogger(__name__)


async def record_event(
    session: AsyncSession,
    *,
    event_type: AuditEventType,
    user_id: uuid.UUID | None = None,
    booking_id: uuid.UUID | None = None,
    description: str | None = None,
    payload: dict[str, Any] | None = None,
    ip_address: str | None = None,
) -> AuditEvent:
    """Persist an audit event and return it."""
    event = AuditEvent(
        user_id=user_id,
        event_type=event_type,
        booking_id=booking_id,
        description=description,
        payload=payload,
        ip_address=ip_address,
    )
    session.add(event)
    await session.commit()
    await session.refresh(event)
    logger.debug("Recorded audit event %s", event_type.value)
    return event


async def list_events(
    session: AsyncSession,
    *,
    event_type: AuditEventType | None = None,
    booking_id: uuid.UUID | None = None,
    limit: int = 100,
) -> list[AuditEvent]:
    """Return the most recent audit events, newest first."""
    stmt = select(AuditEvent).order_by(AuditEvent.created_at.desc()).limit(limit)
    if event_type is not None:
        stmt = stmt.where(AuditEvent.event_type == event_type)
    if booking_id is not None:
        stmt = stmt.where(AuditEvent.booking_id == booking_id)
    result = await session.execute(stmt)
    return list(result.scalars().all())
