"""In-process change feed for row-level change notifications.

Each committed mutation publishes a :class:`ChangeEvent` to the subscribers of
the same salon. Events name the views they invalidate so a client refetches
only what the operation touched. Delivery is best effort: a subscriber whose
queue is full misses the event.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from groomflow.core.config import get_settings

logger = logging.getLogger(__name__)


class ChangeType(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


VIEW_INVALIDATIONS: dict[str, tuple[str, ...]] = {
    "appointment.created": ("appointments", "dashboard"),
    "appointment.updated": ("appointments", "dashboard"),
    "appointment.deleted": ("appointments", "kennels", "dashboard"),
    "appointment.check_in": ("appointments", "kennels", "dashboard"),
    "appointment.start_service": ("appointments", "dashboard"),
    "appointment.ready_for_pickup": ("appointments", "dashboard"),
    "appointment.check_out": ("appointments", "kennels", "dashboard"),
    "appointment.status_changed": ("appointments", "kennels", "dashboard"),
    "appointment.note_added": ("appointments",),
    "payment.recorded": ("payments", "appointments", "kennels", "dashboard"),
    "kennel.created": ("kennels",),
    "kennel.updated": ("kennels",),
    "kennel.deleted": ("kennels",),
    "client.created": ("clients",),
    "client.updated": ("clients", "appointments"),
    "client.deleted": ("clients", "pets", "appointments"),
    "pet.created": ("pets",),
    "pet.updated": ("pets", "appointments"),
    "pet.deleted": ("pets", "appointments"),
    "service.created": ("services",),
    "service.updated": ("services",),
    "service.deleted": ("services",),
    "salon.settings_updated": ("salon",),
}


@dataclass(frozen=True)
class ChangeEvent:
    """A committed change to one row of a salon's data."""

    salon_id: uuid.UUID
    table: str
    change_type: ChangeType
    record_id: uuid.UUID
    operation: str
    invalidates: tuple[str, ...]
    old_status: str | None = None
    new_status: str | None = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def as_payload(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "event_type": self.change_type.value,
            "record_id": str(self.record_id),
            "operation": self.operation,
            "invalidates": list(self.invalidates),
            "old_status": self.old_status,
            "new_status": self.new_status,
            "occurred_at": self.occurred_at.isoformat(),
        }


class Subscription:
    """A subscriber's bounded inbox of change events for one salon."""

    def __init__(
        self,
        salon_id: uuid.UUID,
        *,
        tables: Iterable[str] | None = None,
        max_queue: int,
    ) -> None:
        self.salon_id = salon_id
        self.tables = frozenset(tables) if tables else None
        self.queue: asyncio.Queue[ChangeEvent] = asyncio.Queue(maxsize=max_queue)

    def wants(self, event: ChangeEvent) -> bool:
        if event.salon_id != self.salon_id:
            return False
        return self.tables is None or event.table in self.tables

    async def get(self) -> ChangeEvent:
        return await self.queue.get()

    def drain(self) -> list[ChangeEvent]:
        """Return every event currently queued without waiting."""
        events: list[ChangeEvent] = []
        while not self.queue.empty():
            events.append(self.queue.get_nowait())
        return events


_subscriptions: dict[uuid.UUID, set[Subscription]] = {}


def subscribe(
    salon_id: uuid.UUID,
    *,
    tables: Iterable[str] | None = None,
    max_queue: int | None = None,
) -> Subscription:
    """Register a subscriber for a salon, optionally limited to some tables."""
    size = max_queue or get_settings().change_feed_queue_size
    subscription = Subscription(salon_id, tables=tables, max_queue=size)
    _subscriptions.setdefault(salon_id, set()).add(subscription)
    return subscription


def unsubscribe(subscription: Subscription) -> None:
    subscribers = _subscriptions.get(subscription.salon_id)
    if not subscribers:
        return
    subscribers.discard(subscription)
    if not subscribers:
        _subscriptions.pop(subscription.salon_id, None)


def subscriber_count(salon_id: uuid.UUID) -> int:
    return len(_subscriptions.get(salon_id, ()))


def total_subscribers() -> int:
    return sum(len(subscribers) for subscribers in _subscriptions.values())


def publish(
    salon_id: uuid.UUID,
    *,
    table: str,
    change_type: ChangeType,
    record_id: uuid.UUID,
    operation: str,
    old_status: str | None = None,
    new_status: str | None = None,
) -> ChangeEvent:
    """Fan a change out to the salon's subscribers and return the event."""
    event = ChangeEvent(
        salon_id=salon_id,
        table=table,
        change_type=change_type,
        record_id=record_id,
        operation=operation,
        invalidates=VIEW_INVALIDATIONS.get(operation, (table,)),
        old_status=old_status,
        new_status=new_status,
    )
    for subscription in list(_subscriptions.get(salon_id, ())):
        if not subscription.wants(event):
            continue
        try:
            subscription.queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(
                "Dropping %s event for %s: subscriber queue full",
                operation,
                record_id,
            )
    return event


def clear() -> None:
    """Drop every subscription (mainly for tests)."""
    _subscriptions.clear()


__all__ = [
    "ChangeEvent",
    "ChangeType",
    "Subscription",
    "VIEW_INVALIDATIONS",
    "clear",
    "publish",
    "subscribe",
    "subscriber_count",
    "total_subscribers",
    "unsubscribe",
]
