"""Payment recording endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.api import deps
from groomflow.core.errors import GroomFlowError
from groomflow.models.user import User
from groomflow.schemas.payment import PaymentCreate, PaymentRead
from groomflow.services import payment_service

router = APIRouter()


@router.get("", response_model=list[PaymentRead], summary="List payments")
async def list_payments(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    appointment_id: uuid.UUID | None = Query(default=None),
) -> list[PaymentRead]:
    payments = await payment_service.list_payments(
        session, salon_id=current_user.salon_id, appointment_id=appointment_id
    )
    return [PaymentRead.model_validate(payment) for payment in payments]


@router.post(
    "",
    response_model=PaymentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record payment",
)
async def record_payment(
    payload: PaymentCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> PaymentRead:
    """Record a payment; the appointment it pays for is completed."""
    try:
        payment = await payment_service.record_payment(
            session,
            salon_id=current_user.salon_id,
            appointment_id=payload.appointment_id,
            amount=payload.amount,
            payment_method=payload.payment_method,
            transaction_id=payload.transaction_id,
            notes=payload.notes,
            actor_name=current_user.full_name,
        )
    except (GroomFlowError, ValueError) as exc:
        raise deps.translate_domain_error(exc) from exc
    return PaymentRead.model_validate(payment)
