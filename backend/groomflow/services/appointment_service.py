"""Appointment booking, editing and lookup helpers."""
from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from groomflow.core.config import get_settings
from groomflow.core.errors import InvalidStateError, NotFoundError
from groomflow.db.session import commit_or_raise
from groomflow.models import (
    OCCUPYING_STATUSES,
    Appointment,
    AppointmentService,
    AppointmentStatus,
    Pet,
    Service,
)
from groomflow.services import (
    change_feed,
    client_service,
    kennel_service,
    service_catalog_service,
)
from groomflow.services.change_feed import ChangeType

_MONEY_PLACES: Final = Decimal("0.01")


def _to_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_MONEY_PLACES, rounding=ROUND_HALF_UP)


def _normalize_datetime(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def _base_appointment_query(salon_id: uuid.UUID):
    return (
        select(Appointment)
        .options(
            selectinload(Appointment.client),
            selectinload(Appointment.pet),
            selectinload(Appointment.service_lines).selectinload(
                AppointmentService.service
            ),
        )
        .where(Appointment.salon_id == salon_id)
        .execution_options(populate_existing=True)
    )


async def list_appointments(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    status: AppointmentStatus | None = None,
    client_id: uuid.UUID | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    skip: int = 0,
    limit: int = 50,
) -> Sequence[Appointment]:
    stmt = _base_appointment_query(salon_id)
    if status is not None:
        stmt = stmt.where(Appointment.status == status)
    if client_id is not None:
        stmt = stmt.where(Appointment.client_id == client_id)
    if start is not None:
        stmt = stmt.where(Appointment.scheduled_at >= _normalize_datetime(start))
    if end is not None:
        stmt = stmt.where(Appointment.scheduled_at < _normalize_datetime(end))
    result = await session.execute(
        stmt.order_by(Appointment.scheduled_at.asc()).offset(skip).limit(limit)
    )
    return result.scalars().unique().all()


async def get_appointment(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID,
) -> Appointment:
    """Load an appointment of the salon with client, pet and services."""
    stmt = _base_appointment_query(salon_id).where(Appointment.id == appointment_id)
    result = await session.execute(stmt)
    appointment = result.scalars().unique().one_or_none()
    if appointment is None:
        raise NotFoundError("Appointment not found")
    return appointment


async def _validate_pet(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    client_id: uuid.UUID,
    pet_id: uuid.UUID,
) -> Pet:
    await client_service.get_client(session, salon_id=salon_id, client_id=client_id)
    pet = await session.get(Pet, pet_id)
    if pet is None or pet.salon_id != salon_id:
        raise NotFoundError("Pet not found")
    if pet.client_id != client_id:
        raise ValueError("Pet does not belong to the specified client")
    return pet


def _apply_services(appointment: Appointment, services: Sequence[Service]) -> None:
    """Replace every service line with fresh price snapshots and recompute totals."""
    appointment.service_lines = [
        AppointmentService(service_id=service.id, price=_to_money(service.price))
        for service in services
    ]
    appointment.duration_minutes = sum(service.duration_minutes for service in services)
    appointment.total_price = _to_money(
        sum((service.price for service in services), Decimal("0"))
    )


async def create_appointment(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    client_id: uuid.UUID,
    pet_id: uuid.UUID,
    scheduled_at: datetime,
    service_ids: Sequence[uuid.UUID],
    notes: str | None = None,
) -> Appointment:
    await _validate_pet(session, salon_id=salon_id, client_id=client_id, pet_id=pet_id)
    services = await service_catalog_service.get_bookable_services(
        session, salon_id=salon_id, service_ids=service_ids
    )
    appointment = Appointment(
        salon_id=salon_id,
        client_id=client_id,
        pet_id=pet_id,
        scheduled_at=_normalize_datetime(scheduled_at),
        status=AppointmentStatus.SCHEDULED,
        notes=notes,
    )
    _apply_services(appointment, services)
    session.add(appointment)
    await commit_or_raise(session, action="create appointment")
    change_feed.publish(
        salon_id,
        table="appointments",
        change_type=ChangeType.INSERT,
        record_id=appointment.id,
        operation="appointment.created",
        new_status=appointment.status.value,
    )
    return await get_appointment(
        session, salon_id=salon_id, appointment_id=appointment.id
    )


async def update_appointment(
    session: AsyncSession,
    *,
    appointment: Appointment,
    client_id: uuid.UUID | None = None,
    pet_id: uuid.UUID | None = None,
    scheduled_at: datetime | None = None,
    service_ids: Sequence[uuid.UUID] | None = None,
) -> Appointment:
    """Edit booking details. Status, audit and kennel fields are not editable here."""
    if appointment.status == AppointmentStatus.COMPLETED:
        raise InvalidStateError("Completed appointments cannot be edited")
    salon_id = appointment.salon_id

    if client_id is not None or pet_id is not None:
        target_client = client_id or appointment.client_id
        target_pet = pet_id or appointment.pet_id
        await _validate_pet(
            session, salon_id=salon_id, client_id=target_client, pet_id=target_pet
        )
        appointment.client_id = target_client
        appointment.pet_id = target_pet

    if scheduled_at is not None:
        appointment.scheduled_at = _normalize_datetime(scheduled_at)

    if service_ids is not None:
        services = await service_catalog_service.get_bookable_services(
            session, salon_id=salon_id, service_ids=service_ids
        )
        _apply_services(appointment, services)

    await commit_or_raise(session, action="update appointment")
    change_feed.publish(
        salon_id,
        table="appointments",
        change_type=ChangeType.UPDATE,
        record_id=appointment.id,
        operation="appointment.updated",
    )
    return await get_appointment(
        session, salon_id=salon_id, appointment_id=appointment.id
    )


async def delete_appointment(session: AsyncSession, *, appointment: Appointment) -> None:
    """Delete an appointment and its service lines, freeing any held kennel."""
    salon_id, appointment_id = appointment.salon_id, appointment.id
    if appointment.kennel_number and appointment.status in OCCUPYING_STATUSES:
        await kennel_service.release_kennel(
            session,
            salon_id=salon_id,
            kennel_number=appointment.kennel_number,
            appointment_id=appointment_id,
        )
    await session.delete(appointment)
    await commit_or_raise(session, action="delete appointment")
    change_feed.publish(
        salon_id,
        table="appointments",
        change_type=ChangeType.DELETE,
        record_id=appointment_id,
        operation="appointment.deleted",
        old_status=appointment.status.value,
    )


async def list_overdue_appointments(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    now: datetime | None = None,
    threshold_hours: int | None = None,
) -> Sequence[Appointment]:
    """Pets still on site longer than the configured threshold after check-in."""
    hours = (
        threshold_hours
        if threshold_hours is not None
        else get_settings().overdue_threshold_hours
    )
    cutoff = _normalize_datetime(now or datetime.now(UTC)) - timedelta(hours=hours)
    stmt = _base_appointment_query(salon_id).where(
        Appointment.status.in_(list(OCCUPYING_STATUSES)),
        Appointment.check_in_time.is_not(None),
        Appointment.check_in_time < cutoff,
    )
    result = await session.execute(stmt.order_by(Appointment.check_in_time.asc()))
    return result.scalars().unique().all()
