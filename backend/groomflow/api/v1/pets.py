"""Pet profile endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.api import deps
from groomflow.core.errors import GroomFlowError
from groomflow.models.user import User
from groomflow.schemas.pet import PetCreate, PetRead, PetUpdate
from groomflow.services import pet_service

router = APIRouter()


@router.get("", response_model=list[PetRead], summary="List pets")
async def list_pets(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    client_id: uuid.UUID | None = Query(default=None),
    skip: int = 0,
    limit: int = 50,
) -> list[PetRead]:
    pets = await pet_service.list_pets(
        session,
        salon_id=current_user.salon_id,
        client_id=client_id,
        skip=skip,
        limit=min(limit, 200),
    )
    return [PetRead.model_validate(pet) for pet in pets]


@router.post(
    "",
    response_model=PetRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create pet",
)
async def create_pet(
    payload: PetCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> PetRead:
    """Register a pet under one of the salon's clients."""
    try:
        pet = await pet_service.create_pet(
            session, salon_id=current_user.salon_id, payload=payload
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return PetRead.model_validate(pet)


@router.get("/{pet_id}", response_model=PetRead, summary="Get pet")
async def get_pet(
    pet_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> PetRead:
    try:
        pet = await pet_service.get_pet(
            session, salon_id=current_user.salon_id, pet_id=pet_id
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return PetRead.model_validate(pet)


@router.patch("/{pet_id}", response_model=PetRead, summary="Update pet")
async def update_pet(
    pet_id: uuid.UUID,
    payload: PetUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> PetRead:
    try:
        pet = await pet_service.get_pet(
            session, salon_id=current_user.salon_id, pet_id=pet_id
        )
        pet = await pet_service.update_pet(session, pet=pet, payload=payload)
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return PetRead.model_validate(pet)


@router.delete(
    "/{pet_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete pet"
)
async def delete_pet(
    pet_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> None:
    try:
        pet = await pet_service.get_pet(
            session, salon_id=current_user.salon_id, pet_id=pet_id
        )
        await pet_service.delete_pet(session, pet=pet)
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return None
