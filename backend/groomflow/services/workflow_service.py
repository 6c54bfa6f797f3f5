"""Appointment workflow engine: status machine, kennel handling and notes.

Every status change goes through :func:`_transition`, which rejects completed
appointments, checks the transition table and then applies the operation's
side effects. The appointment row, the kennel row and the audit event are
committed together; change events are published only after the commit.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.core.errors import GroomFlowError, InvalidStateError
from groomflow.db.session import commit_or_raise
from groomflow.models import OCCUPYING_STATUSES, Appointment, AppointmentStatus
from groomflow.models.mixins import utcnow
from groomflow.services import (
    appointment_service,
    audit_service,
    change_feed,
    kennel_service,
)
from groomflow.services.change_feed import ChangeType

logger = logging.getLogger(__name__)

_NOTE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"

MANUAL_STATUSES: frozenset[AppointmentStatus] = frozenset(
    {
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.ON_HOLD,
        AppointmentStatus.CANCELLED,
    }
)

_ALLOWED_TRANSITIONS: dict[AppointmentStatus, set[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: {AppointmentStatus.CHECKED_IN, *MANUAL_STATUSES},
    AppointmentStatus.CONFIRMED: {AppointmentStatus.CHECKED_IN, *MANUAL_STATUSES},
    AppointmentStatus.ON_HOLD: set(MANUAL_STATUSES),
    AppointmentStatus.CHECKED_IN: {
        AppointmentStatus.CHECKED_IN,
        AppointmentStatus.IN_PROGRESS,
        *MANUAL_STATUSES,
    },
    AppointmentStatus.IN_PROGRESS: {
        AppointmentStatus.READY_FOR_PICKUP,
        *MANUAL_STATUSES,
    },
    AppointmentStatus.READY_FOR_PICKUP: {
        AppointmentStatus.COMPLETED,
        *MANUAL_STATUSES,
    },
    AppointmentStatus.CANCELLED: set(MANUAL_STATUSES),
    AppointmentStatus.COMPLETED: set(),
}

_SideEffect = Callable[[Appointment], Awaitable[None]]


def _assert_transition_allowed(
    appointment: Appointment, target: AppointmentStatus
) -> None:
    if appointment.status == AppointmentStatus.COMPLETED:
        raise InvalidStateError("Appointment is already completed")
    allowed = _ALLOWED_TRANSITIONS.get(appointment.status, set())
    if target not in allowed:
        raise InvalidStateError(
            f"Cannot move appointment from {appointment.status.value} to {target.value}"
        )


def can_transition(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return target in _ALLOWED_TRANSITIONS.get(current, set())


async def _release_held_kennel(
    session: AsyncSession, appointment: Appointment
) -> str | None:
    """Release the kennel an occupying appointment holds, returning its number."""
    if not appointment.kennel_number or appointment.status not in OCCUPYING_STATUSES:
        return None
    await kennel_service.release_kennel(
        session,
        salon_id=appointment.salon_id,
        kennel_number=appointment.kennel_number,
        appointment_id=appointment.id,
    )
    return appointment.kennel_number


async def complete_appointment(
    session: AsyncSession,
    *,
    appointment: Appointment,
    actor_name: str | None,
    release_kennel: bool,
    record_check_out: bool,
    total_price: Decimal | None = None,
) -> None:
    """Mark ``appointment`` completed inside the caller's transaction.

    Check-out and payment capture both close appointments through here. The
    caller decides whether the held kennel is freed and whether check-out
    audit fields are written; nothing is committed.
    """
    if record_check_out:
        appointment.check_out_time = utcnow()
        appointment.checked_out_by = actor_name
    if release_kennel:
        await _release_held_kennel(session, appointment)
    if total_price is not None:
        appointment.total_price = total_price
    appointment.status = AppointmentStatus.COMPLETED


async def _transition(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID,
    target: AppointmentStatus,
    actor_name: str | None,
    operation: str,
    side_effect: _SideEffect | None = None,
) -> Appointment:
    appointment = await appointment_service.get_appointment(
        session, salon_id=salon_id, appointment_id=appointment_id
    )
    _assert_transition_allowed(appointment, target)
    previous = appointment.status

    try:
        if side_effect is not None:
            await side_effect(appointment)
        appointment.status = target
    except GroomFlowError:
        await session.rollback()
        raise

    audit_service.record_event(
        session,
        event_type=operation,
        salon_id=salon_id,
        appointment_id=appointment.id,
        actor_name=actor_name,
        description=f"{previous.value} -> {target.value}",
        payload={
            "from": previous.value,
            "to": target.value,
            "kennel_number": appointment.kennel_number,
        },
    )
    await commit_or_raise(session, action=operation.replace(".", " "))
    logger.info(
        "Appointment %s moved %s -> %s by %s",
        appointment.id,
        previous.value,
        target.value,
        actor_name,
    )
    change_feed.publish(
        salon_id,
        table="appointments",
        change_type=ChangeType.UPDATE,
        record_id=appointment.id,
        operation=operation,
        old_status=previous.value,
        new_status=target.value,
    )
    return await appointment_service.get_appointment(
        session, salon_id=salon_id, appointment_id=appointment.id
    )


async def check_in(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID,
    actor_name: str | None,
    kennel_number: str | None = None,
    kennel_notes: str | None = None,
) -> Appointment:
    """Check the pet in, optionally placing it in ``kennel_number``.

    The first check-in stamps the time and actor. Checking in again re-assigns
    the kennel and keeps the original stamp.
    """
    requested = kennel_number.strip() if kennel_number else None

    async def _assign(appointment: Appointment) -> None:
        if appointment.check_in_time is None:
            appointment.check_in_time = utcnow()
            appointment.checked_in_by = actor_name

        held = (
            appointment.kennel_number
            if appointment.status in OCCUPYING_STATUSES
            else None
        )
        if requested:
            kennel = await kennel_service.get_kennel_by_number(
                session, salon_id=salon_id, kennel_number=requested
            )
            pet_size = appointment.pet.size if appointment.pet else None
            if not kennel_service.is_kennel_compatible(pet_size, kennel.size_class):
                logger.warning(
                    "Kennel %s (%s) does not match pet size %s for appointment %s",
                    kennel.kennel_number,
                    kennel.size_class.value,
                    pet_size.value if pet_size else None,
                    appointment.id,
                )
            await kennel_service.claim_kennel(
                session, kennel=kennel, appointment_id=appointment.id
            )
        if held and held != requested:
            await kennel_service.release_kennel(
                session,
                salon_id=salon_id,
                kennel_number=held,
                appointment_id=appointment.id,
            )
        appointment.kennel_number = requested
        appointment.kennel_notes = kennel_notes

    return await _transition(
        session,
        salon_id=salon_id,
        appointment_id=appointment_id,
        target=AppointmentStatus.CHECKED_IN,
        actor_name=actor_name,
        operation="appointment.check_in",
        side_effect=_assign,
    )


async def start_service(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID,
    actor_name: str | None,
) -> Appointment:
    return await _transition(
        session,
        salon_id=salon_id,
        appointment_id=appointment_id,
        target=AppointmentStatus.IN_PROGRESS,
        actor_name=actor_name,
        operation="appointment.start_service",
    )


async def mark_ready_for_pickup(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID,
    actor_name: str | None,
) -> Appointment:
    return await _transition(
        session,
        salon_id=salon_id,
        appointment_id=appointment_id,
        target=AppointmentStatus.READY_FOR_PICKUP,
        actor_name=actor_name,
        operation="appointment.ready_for_pickup",
    )


async def check_out(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID,
    actor_name: str | None,
) -> Appointment:
    """Hand the pet back: stamp check-out, free the kennel and complete."""

    async def _close(appointment: Appointment) -> None:
        await complete_appointment(
            session,
            appointment=appointment,
            actor_name=actor_name,
            release_kennel=True,
            record_check_out=True,
        )

    return await _transition(
        session,
        salon_id=salon_id,
        appointment_id=appointment_id,
        target=AppointmentStatus.COMPLETED,
        actor_name=actor_name,
        operation="appointment.check_out",
        side_effect=_close,
    )


async def set_status(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID,
    status: AppointmentStatus,
    actor_name: str | None,
) -> Appointment:
    """Confirm, hold or cancel an appointment.

    Leaving the on-site statuses frees the kennel the appointment held.
    """
    if status not in MANUAL_STATUSES:
        raise ValueError(
            "Status must be one of: "
            + ", ".join(sorted(item.value for item in MANUAL_STATUSES))
        )

    async def _leave_kennel(appointment: Appointment) -> None:
        await _release_held_kennel(session, appointment)

    return await _transition(
        session,
        salon_id=salon_id,
        appointment_id=appointment_id,
        target=status,
        actor_name=actor_name,
        operation="appointment.status_changed",
        side_effect=_leave_kennel,
    )


def format_note(text: str) -> str:
    return f"[{utcnow().strftime(_NOTE_TIMESTAMP_FORMAT)}] {text}"


async def add_note(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID,
    text: str,
    actor_name: str | None,
) -> Appointment:
    """Append a timestamped entry to the appointment's notes log."""
    body = (text or "").strip()
    if not body:
        raise ValueError("Note text must not be empty")
    appointment = await appointment_service.get_appointment(
        session, salon_id=salon_id, appointment_id=appointment_id
    )
    entry = format_note(body)
    existing = appointment.notes or ""
    appointment.notes = f"{existing}\n\n{entry}" if existing.strip() else entry

    audit_service.record_event(
        session,
        event_type="appointment.note_added",
        salon_id=salon_id,
        appointment_id=appointment.id,
        actor_name=actor_name,
        description=entry,
    )
    await commit_or_raise(session, action="add appointment note")
    change_feed.publish(
        salon_id,
        table="appointments",
        change_type=ChangeType.UPDATE,
        record_id=appointment.id,
        operation="appointment.note_added",
        old_status=appointment.status.value,
        new_status=appointment.status.value,
    )
    return await appointment_service.get_appointment(
        session, salon_id=salon_id, appointment_id=appointment.id
    )
