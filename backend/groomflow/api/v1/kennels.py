"""Kennel registry endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.api import deps
from groomflow.core.errors import GroomFlowError
from groomflow.models.kennel import SizeClass
from groomflow.models.user import User
from groomflow.schemas.kennel import KennelCreate, KennelRead, KennelUpdate
from groomflow.services import kennel_service

router = APIRouter()


@router.get("", response_model=list[KennelRead], summary="List kennels")
async def list_kennels(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> list[KennelRead]:
    kennels = await kennel_service.list_kennels(
        session, salon_id=current_user.salon_id
    )
    return [KennelRead.model_validate(kennel) for kennel in kennels]


@router.get(
    "/available",
    response_model=list[KennelRead],
    summary="Kennels free for a check-in",
)
async def list_available_kennels(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    appointment_id: uuid.UUID | None = Query(default=None),
    pet_size: SizeClass | None = Query(default=None),
) -> list[KennelRead]:
    """Free kennels that fit the pet, plus the one the appointment already holds."""
    try:
        kennels = await kennel_service.list_available_kennels(
            session,
            salon_id=current_user.salon_id,
            appointment_id=appointment_id,
            pet_size=pet_size,
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return [KennelRead.model_validate(kennel) for kennel in kennels]


@router.post(
    "",
    response_model=KennelRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add kennel",
)
async def create_kennel(
    payload: KennelCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> KennelRead:
    try:
        kennel = await kennel_service.create_kennel(
            session,
            salon_id=current_user.salon_id,
            kennel_number=payload.kennel_number,
            size_class=payload.size_class,
            notes=payload.notes,
        )
    except (GroomFlowError, ValueError) as exc:
        raise deps.translate_domain_error(exc) from exc
    return KennelRead.model_validate(kennel)


@router.patch("/{kennel_id}", response_model=KennelRead, summary="Edit kennel")
async def update_kennel(
    kennel_id: uuid.UUID,
    payload: KennelUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> KennelRead:
    try:
        kennel = await kennel_service.get_kennel(
            session, salon_id=current_user.salon_id, kennel_id=kennel_id
        )
        kennel = await kennel_service.update_kennel(
            session,
            kennel=kennel,
            kennel_number=payload.kennel_number,
            size_class=payload.size_class,
            notes=payload.notes,
        )
    except (GroomFlowError, ValueError) as exc:
        raise deps.translate_domain_error(exc) from exc
    return KennelRead.model_validate(kennel)


@router.delete(
    "/{kennel_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove kennel"
)
async def delete_kennel(
    kennel_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> None:
    try:
        kennel = await kennel_service.get_kennel(
            session, salon_id=current_user.salon_id, kennel_id=kennel_id
        )
        await kennel_service.delete_kennel(session, kennel=kennel)
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return None
