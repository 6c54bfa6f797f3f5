"""Pet profile helpers."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.core.errors import InvalidStateError, NotFoundError
from groomflow.db.session import commit_or_raise
from groomflow.models import OCCUPYING_STATUSES, Appointment, Pet
from groomflow.schemas.pet import PetCreate, PetUpdate
from groomflow.services import change_feed, client_service
from groomflow.services.change_feed import ChangeType


async def list_pets(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    client_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 50,
) -> Sequence[Pet]:
    stmt = select(Pet).where(Pet.salon_id == salon_id)
    if client_id is not None:
        stmt = stmt.where(Pet.client_id == client_id)
    result = await session.execute(
        stmt.order_by(Pet.name.asc()).offset(skip).limit(limit)
    )
    return result.scalars().all()


async def get_pet(
    session: AsyncSession, *, salon_id: uuid.UUID, pet_id: uuid.UUID
) -> Pet:
    pet = await session.get(Pet, pet_id)
    if pet is None or pet.salon_id != salon_id:
        raise NotFoundError("Pet not found")
    return pet


async def create_pet(
    session: AsyncSession, *, salon_id: uuid.UUID, payload: PetCreate
) -> Pet:
    await client_service.get_client(
        session, salon_id=salon_id, client_id=payload.client_id
    )
    pet = Pet(salon_id=salon_id, **payload.model_dump())
    session.add(pet)
    await commit_or_raise(session, action="create pet")
    await session.refresh(pet)
    change_feed.publish(
        salon_id,
        table="pets",
        change_type=ChangeType.INSERT,
        record_id=pet.id,
        operation="pet.created",
    )
    return pet


async def update_pet(session: AsyncSession, *, pet: Pet, payload: PetUpdate) -> Pet:
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(pet, field, value)
    await commit_or_raise(session, action="update pet")
    await session.refresh(pet)
    change_feed.publish(
        pet.salon_id,
        table="pets",
        change_type=ChangeType.UPDATE,
        record_id=pet.id,
        operation="pet.updated",
    )
    return pet


async def delete_pet(session: AsyncSession, *, pet: Pet) -> None:
    on_site = await session.execute(
        select(Appointment.id).where(
            Appointment.pet_id == pet.id,
            Appointment.status.in_(list(OCCUPYING_STATUSES)),
        )
    )
    if on_site.first() is not None:
        raise InvalidStateError("Pet is currently checked in")
    salon_id, pet_id = pet.salon_id, pet.id
    await session.delete(pet)
    await commit_or_raise(session, action="delete pet")
    change_feed.publish(
        salon_id,
        table="pets",
        change_type=ChangeType.DELETE,
        record_id=pet_id,
        operation="pet.deleted",
    )
