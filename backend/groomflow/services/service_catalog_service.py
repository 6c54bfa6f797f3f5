"""Grooming service catalog management."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.core.errors import NotFoundError
from groomflow.db.session import commit_or_raise
from groomflow.models import Service
from groomflow.schemas.service import ServiceCreate, ServiceUpdate
from groomflow.services import change_feed
from groomflow.services.change_feed import ChangeType


async def list_services(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    include_inactive: bool = False,
) -> Sequence[Service]:
    stmt = select(Service).where(Service.salon_id == salon_id)
    if not include_inactive:
        stmt = stmt.where(Service.is_active.is_(True))
    result = await session.execute(stmt.order_by(Service.name.asc()))
    return result.scalars().all()


async def get_service(
    session: AsyncSession, *, salon_id: uuid.UUID, service_id: uuid.UUID
) -> Service:
    service = await session.get(Service, service_id)
    if service is None or service.salon_id != salon_id:
        raise NotFoundError("Service not found")
    return service


async def get_bookable_services(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    service_ids: Sequence[uuid.UUID],
) -> list[Service]:
    """Return active services in the order requested; duplicates are rejected."""
    if not service_ids:
        raise ValueError("At least one service is required")
    if len(set(service_ids)) != len(service_ids):
        raise ValueError("Duplicate services requested")
    result = await session.execute(
        select(Service).where(
            Service.salon_id == salon_id,
            Service.id.in_(list(service_ids)),
            Service.is_active.is_(True),
        )
    )
    by_id = {service.id: service for service in result.scalars().all()}
    missing = [service_id for service_id in service_ids if service_id not in by_id]
    if missing:
        raise NotFoundError("Service not available")
    return [by_id[service_id] for service_id in service_ids]


async def create_service(
    session: AsyncSession, *, salon_id: uuid.UUID, payload: ServiceCreate
) -> Service:
    service = Service(salon_id=salon_id, **payload.model_dump())
    session.add(service)
    await commit_or_raise(session, action="create service")
    await session.refresh(service)
    change_feed.publish(
        salon_id,
        table="services",
        change_type=ChangeType.INSERT,
        record_id=service.id,
        operation="service.created",
    )
    return service


async def update_service(
    session: AsyncSession, *, service: Service, payload: ServiceUpdate
) -> Service:
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(service, field, value)
    await commit_or_raise(session, action="update service")
    await session.refresh(service)
    change_feed.publish(
        service.salon_id,
        table="services",
        change_type=ChangeType.UPDATE,
        record_id=service.id,
        operation="service.updated",
    )
    return service


async def delete_service(session: AsyncSession, *, service: Service) -> Service:
    """Retire ``service`` from the catalog.

    The row is kept inactive so booked appointment lines and their price
    snapshots still resolve; it is no longer offered for new bookings.
    """
    service.is_active = False
    await commit_or_raise(session, action="delete service")
    await session.refresh(service)
    change_feed.publish(
        service.salon_id,
        table="services",
        change_type=ChangeType.UPDATE,
        record_id=service.id,
        operation="service.deleted",
    )
    return service
