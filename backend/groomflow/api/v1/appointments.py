"""Appointment booking and front-desk workflow endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.api import deps
from groomflow.core.errors import GroomFlowError
from groomflow.models.appointment import AppointmentStatus
from groomflow.models.user import User
from groomflow.schemas.appointment import (
    AppointmentCreate,
    AppointmentRead,
    AppointmentUpdate,
    CheckInRequest,
    NoteCreate,
    StatusChangeRequest,
)
from groomflow.schemas.audit import AuditEventRead
from groomflow.services import appointment_service, audit_service, workflow_service

router = APIRouter()


@router.get("", response_model=list[AppointmentRead], summary="List appointments")
async def list_appointments(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    status_filter: AppointmentStatus | None = Query(default=None, alias="status"),
    client_id: uuid.UUID | None = Query(default=None),
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    skip: int = 0,
    limit: int = 50,
) -> list[AppointmentRead]:
    """Return the salon's appointments ordered by scheduled time."""
    appointments = await appointment_service.list_appointments(
        session,
        salon_id=current_user.salon_id,
        status=status_filter,
        client_id=client_id,
        start=start,
        end=end,
        skip=skip,
        limit=min(limit, 200),
    )
    return [AppointmentRead.from_model(item) for item in appointments]


@router.post(
    "",
    response_model=AppointmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Book appointment",
)
async def create_appointment(
    payload: AppointmentCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AppointmentRead:
    try:
        appointment = await appointment_service.create_appointment(
            session,
            salon_id=current_user.salon_id,
            client_id=payload.client_id,
            pet_id=payload.pet_id,
            scheduled_at=payload.scheduled_at,
            service_ids=payload.service_ids,
            notes=payload.notes,
        )
    except (GroomFlowError, ValueError) as exc:
        raise deps.translate_domain_error(exc) from exc
    return AppointmentRead.from_model(appointment)


@router.get(
    "/overdue",
    response_model=list[AppointmentRead],
    summary="Pets on site past the overdue threshold",
)
async def list_overdue_appointments(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    threshold_hours: int | None = Query(default=None, ge=1),
) -> list[AppointmentRead]:
    appointments = await appointment_service.list_overdue_appointments(
        session, salon_id=current_user.salon_id, threshold_hours=threshold_hours
    )
    return [AppointmentRead.from_model(item) for item in appointments]


@router.get(
    "/{appointment_id}", response_model=AppointmentRead, summary="Get appointment"
)
async def get_appointment(
    appointment_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AppointmentRead:
    try:
        appointment = await appointment_service.get_appointment(
            session, salon_id=current_user.salon_id, appointment_id=appointment_id
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return AppointmentRead.from_model(appointment)


@router.patch(
    "/{appointment_id}",
    response_model=AppointmentRead,
    summary="Edit appointment booking",
)
async def update_appointment(
    appointment_id: uuid.UUID,
    payload: AppointmentUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AppointmentRead:
    """Reschedule, re-assign pet/client or replace the booked services."""
    try:
        appointment = await appointment_service.get_appointment(
            session, salon_id=current_user.salon_id, appointment_id=appointment_id
        )
        appointment = await appointment_service.update_appointment(
            session,
            appointment=appointment,
            client_id=payload.client_id,
            pet_id=payload.pet_id,
            scheduled_at=payload.scheduled_at,
            service_ids=payload.service_ids,
        )
    except (GroomFlowError, ValueError) as exc:
        raise deps.translate_domain_error(exc) from exc
    return AppointmentRead.from_model(appointment)


@router.delete(
    "/{appointment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete appointment",
)
async def delete_appointment(
    appointment_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> None:
    try:
        appointment = await appointment_service.get_appointment(
            session, salon_id=current_user.salon_id, appointment_id=appointment_id
        )
        await appointment_service.delete_appointment(session, appointment=appointment)
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return None


@router.post(
    "/{appointment_id}/check-in",
    response_model=AppointmentRead,
    summary="Check pet in",
)
async def check_in_appointment(
    appointment_id: uuid.UUID,
    payload: CheckInRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AppointmentRead:
    """Check the pet in and optionally place it in a kennel."""
    try:
        appointment = await workflow_service.check_in(
            session,
            salon_id=current_user.salon_id,
            appointment_id=appointment_id,
            actor_name=current_user.full_name,
            kennel_number=payload.kennel_number,
            kennel_notes=payload.kennel_notes,
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return AppointmentRead.from_model(appointment)


@router.post(
    "/{appointment_id}/start-service",
    response_model=AppointmentRead,
    summary="Start grooming",
)
async def start_service(
    appointment_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AppointmentRead:
    try:
        appointment = await workflow_service.start_service(
            session,
            salon_id=current_user.salon_id,
            appointment_id=appointment_id,
            actor_name=current_user.full_name,
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return AppointmentRead.from_model(appointment)


@router.post(
    "/{appointment_id}/ready-for-pickup",
    response_model=AppointmentRead,
    summary="Mark ready for pickup",
)
async def mark_ready_for_pickup(
    appointment_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AppointmentRead:
    try:
        appointment = await workflow_service.mark_ready_for_pickup(
            session,
            salon_id=current_user.salon_id,
            appointment_id=appointment_id,
            actor_name=current_user.full_name,
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return AppointmentRead.from_model(appointment)


@router.post(
    "/{appointment_id}/check-out",
    response_model=AppointmentRead,
    summary="Check pet out",
)
async def check_out_appointment(
    appointment_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AppointmentRead:
    """Hand the pet back to its owner and free the kennel."""
    try:
        appointment = await workflow_service.check_out(
            session,
            salon_id=current_user.salon_id,
            appointment_id=appointment_id,
            actor_name=current_user.full_name,
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    return AppointmentRead.from_model(appointment)


@router.post(
    "/{appointment_id}/status",
    response_model=AppointmentRead,
    summary="Confirm, hold or cancel",
)
async def change_status(
    appointment_id: uuid.UUID,
    payload: StatusChangeRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AppointmentRead:
    try:
        appointment = await workflow_service.set_status(
            session,
            salon_id=current_user.salon_id,
            appointment_id=appointment_id,
            status=payload.status,
            actor_name=current_user.full_name,
        )
    except (GroomFlowError, ValueError) as exc:
        raise deps.translate_domain_error(exc) from exc
    return AppointmentRead.from_model(appointment)


@router.post(
    "/{appointment_id}/notes",
    response_model=AppointmentRead,
    summary="Append note",
)
async def add_note(
    appointment_id: uuid.UUID,
    payload: NoteCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AppointmentRead:
    try:
        appointment = await workflow_service.add_note(
            session,
            salon_id=current_user.salon_id,
            appointment_id=appointment_id,
            text=payload.text,
            actor_name=current_user.full_name,
        )
    except (GroomFlowError, ValueError) as exc:
        raise deps.translate_domain_error(exc) from exc
    return AppointmentRead.from_model(appointment)


@router.get(
    "/{appointment_id}/events",
    response_model=list[AuditEventRead],
    summary="Workflow history",
)
async def list_appointment_events(
    appointment_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> list[AuditEventRead]:
    try:
        await appointment_service.get_appointment(
            session, salon_id=current_user.salon_id, appointment_id=appointment_id
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    events = await audit_service.list_events_for_appointment(
        session, salon_id=current_user.salon_id, appointment_id=appointment_id
    )
    return [AuditEventRead.model_validate(event) for event in events]
