"""Helpers for recording audit events inside the caller's transaction."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.models.audit_event import AuditEvent


def record_event(
    session: AsyncSession,
    *,
    event_type: str,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID | None = None,
    actor_name: str | None = None,
    description: str | None = None,
    payload: dict[str, Any] | None = None,
) -> AuditEvent:
    """Stage an audit event; it is persisted by the caller's commit."""
    event = AuditEvent(
        salon_id=salon_id,
        appointment_id=appointment_id,
        actor_name=actor_name,
        event_type=event_type,
        description=description,
        payload=payload,
    )
    session.add(event)
    return event


async def list_events_for_appointment(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID,
) -> Sequence[AuditEvent]:
    result = await session.execute(
        select(AuditEvent)
        .where(
            AuditEvent.salon_id == salon_id,
            AuditEvent.appointment_id == appointment_id,
        )
        .order_by(AuditEvent.created_at.asc())
    )
    return result.scalars().all()
