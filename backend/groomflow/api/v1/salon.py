"""Salon settings endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.api import deps
from groomflow.core.errors import GroomFlowError
from groomflow.models.user import User
from groomflow.schemas.salon import SalonSettingsRead, SalonSettingsUpdate
from groomflow.services import salon_service

router = APIRouter()


@router.get("/settings", response_model=SalonSettingsRead, summary="Salon settings")
async def read_salon_settings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> SalonSettingsRead:
    try:
        salon = await salon_service.get_salon(session, salon_id=current_user.salon_id)
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return SalonSettingsRead.model_validate(salon)


@router.put(
    "/settings", response_model=SalonSettingsRead, summary="Update salon settings"
)
async def update_salon_settings(
    payload: SalonSettingsUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> SalonSettingsRead:
    """Replace the salon's display name and contact details."""
    try:
        salon = await salon_service.update_salon_settings(
            session, salon_id=current_user.salon_id, payload=payload
        )
    except (GroomFlowError, ValueError) as exc:
        raise deps.translate_domain_error(exc) from exc
    return SalonSettingsRead.model_validate(salon)
