"""Client record helpers."""
from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.core.errors import InvalidStateError, NotFoundError
from groomflow.db.session import commit_or_raise
from groomflow.models import OCCUPYING_STATUSES, Appointment, Client
from groomflow.schemas.client import ClientCreate, ClientUpdate
from groomflow.services import change_feed
from groomflow.services.change_feed import ChangeType


async def list_clients(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    search: str | None = None,
    skip: int = 0,
    limit: int = 50,
) -> Sequence[Client]:
    stmt = select(Client).where(Client.salon_id == salon_id)
    if search:
        stmt = stmt.where(Client.name.ilike(f"%{search.strip()}%"))
    result = await session.execute(
        stmt.order_by(Client.name.asc()).offset(skip).limit(limit)
    )
    return result.scalars().all()


async def get_client(
    session: AsyncSession, *, salon_id: uuid.UUID, client_id: uuid.UUID
) -> Client:
    client = await session.get(Client, client_id)
    if client is None or client.salon_id != salon_id:
        raise NotFoundError("Client not found")
    return client


async def create_client(
    session: AsyncSession, *, salon_id: uuid.UUID, payload: ClientCreate
) -> Client:
    client = Client(salon_id=salon_id, **payload.model_dump())
    session.add(client)
    await commit_or_raise(session, action="create client")
    await session.refresh(client)
    change_feed.publish(
        salon_id,
        table="clients",
        change_type=ChangeType.INSERT,
        record_id=client.id,
        operation="client.created",
    )
    return client


async def update_client(
    session: AsyncSession, *, client: Client, payload: ClientUpdate
) -> Client:
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(client, field, value)
    await commit_or_raise(session, action="update client")
    await session.refresh(client)
    change_feed.publish(
        client.salon_id,
        table="clients",
        change_type=ChangeType.UPDATE,
        record_id=client.id,
        operation="client.updated",
    )
    return client


async def delete_client(session: AsyncSession, *, client: Client) -> None:
    on_site = await session.execute(
        select(Appointment.id).where(
            Appointment.client_id == client.id,
            Appointment.status.in_(list(OCCUPYING_STATUSES)),
        )
    )
    if on_site.first() is not None:
        raise InvalidStateError("Client has a pet checked in")
    salon_id, client_id = client.salon_id, client.id
    await session.delete(client)
    await commit_or_raise(session, action="delete client")
    change_feed.publish(
        salon_id,
        table="clients",
        change_type=ChangeType.DELETE,
        record_id=client_id,
        operation="client.deleted",
    )
