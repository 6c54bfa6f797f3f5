"""Client record endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.api import deps
from groomflow.core.errors import GroomFlowError
from groomflow.models.user import User
from groomflow.schemas.client import ClientCreate, ClientRead, ClientUpdate
from groomflow.services import client_service

router = APIRouter()


@router.get("", response_model=list[ClientRead], summary="List clients")
async def list_clients(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    search: str | None = Query(default=None),
    skip: int = 0,
    limit: int = 50,
) -> list[ClientRead]:
    clients = await client_service.list_clients(
        session,
        salon_id=current_user.salon_id,
        search=search,
        skip=skip,
        limit=min(limit, 200),
    )
    return [ClientRead.model_validate(client) for client in clients]


@router.post(
    "",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create client",
)
async def create_client(
    payload: ClientCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> ClientRead:
    try:
        client = await client_service.create_client(
            session, salon_id=current_user.salon_id, payload=payload
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return ClientRead.model_validate(client)


@router.get("/{client_id}", response_model=ClientRead, summary="Get client")
async def get_client(
    client_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> ClientRead:
    try:
        client = await client_service.get_client(
            session, salon_id=current_user.salon_id, client_id=client_id
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return ClientRead.model_validate(client)


@router.patch("/{client_id}", response_model=ClientRead, summary="Update client")
async def update_client(
    client_id: uuid.UUID,
    payload: ClientUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> ClientRead:
    try:
        client = await client_service.get_client(
            session, salon_id=current_user.salon_id, client_id=client_id
        )
        client = await client_service.update_client(
            session, client=client, payload=payload
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return ClientRead.model_validate(client)


@router.delete(
    "/{client_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete client"
)
async def delete_client(
    client_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> None:
    try:
        client = await client_service.get_client(
            session, salon_id=current_user.salon_id, client_id=client_id
        )
        await client_service.delete_client(session, client=client)
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return None
