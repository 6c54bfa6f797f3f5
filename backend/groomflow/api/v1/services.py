"""Grooming service catalog endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.api import deps
from groomflow.core.errors import GroomFlowError
from groomflow.models.user import User
from groomflow.schemas.service import ServiceCreate, ServiceRead, ServiceUpdate
from groomflow.services import service_catalog_service

router = APIRouter()


@router.get("", response_model=list[ServiceRead], summary="List catalog services")
async def list_services(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    include_inactive: bool = Query(default=False),
) -> list[ServiceRead]:
    services = await service_catalog_service.list_services(
        session, salon_id=current_user.salon_id, include_inactive=include_inactive
    )
    return [ServiceRead.model_validate(service) for service in services]


@router.post(
    "",
    response_model=ServiceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create catalog service",
)
async def create_service(
    payload: ServiceCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> ServiceRead:
    try:
        service = await service_catalog_service.create_service(
            session, salon_id=current_user.salon_id, payload=payload
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return ServiceRead.model_validate(service)


@router.patch(
    "/{service_id}", response_model=ServiceRead, summary="Update catalog service"
)
async def update_service(
    service_id: uuid.UUID,
    payload: ServiceUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> ServiceRead:
    """Price changes apply to future bookings only."""
    try:
        service = await service_catalog_service.get_service(
            session, salon_id=current_user.salon_id, service_id=service_id
        )
        service = await service_catalog_service.update_service(
            session, service=service, payload=payload
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return ServiceRead.model_validate(service)


@router.delete(
    "/{service_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Retire catalog service",
)
async def delete_service(
    service_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> None:
    try:
        service = await service_catalog_service.get_service(
            session, salon_id=current_user.salon_id, service_id=service_id
        )
        await service_catalog_service.delete_service(session, service=service)
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return None
