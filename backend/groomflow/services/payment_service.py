"""Payment capture for grooming appointments."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.core.config import get_settings
from groomflow.db.session import commit_or_raise
from groomflow.models import Payment, PaymentMethod, PaymentStatus
from groomflow.services import (
    appointment_service,
    audit_service,
    change_feed,
    workflow_service,
)
from groomflow.services.change_feed import ChangeType

logger = logging.getLogger(__name__)


def _normalize_amount(amount: Decimal | int | float | str) -> Decimal:
    try:
        value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError("Payment amount must be a number") from exc
    if value <= 0:
        raise ValueError("Payment amount must be greater than zero")
    return value


async def record_payment(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID,
    amount: Decimal | int | float | str,
    payment_method: PaymentMethod,
    transaction_id: str | None = None,
    notes: str | None = None,
    actor_name: str | None = None,
) -> Payment:
    """Record a completed payment and close out the appointment it pays for.

    The appointment is completed whatever its current status and its total
    becomes the amount paid. Whether the held kennel is freed follows the
    ``PAYMENT_RELEASES_KENNEL`` setting; check-out fields are left alone.
    """
    value = _normalize_amount(amount)
    appointment = await appointment_service.get_appointment(
        session, salon_id=salon_id, appointment_id=appointment_id
    )
    previous = appointment.status

    payment = Payment(
        salon_id=salon_id,
        appointment_id=appointment.id,
        amount=value,
        payment_method=PaymentMethod(payment_method),
        payment_status=PaymentStatus.COMPLETED,
        transaction_id=transaction_id,
        notes=notes,
    )
    session.add(payment)
    await workflow_service.complete_appointment(
        session,
        appointment=appointment,
        actor_name=actor_name,
        release_kennel=get_settings().payment_releases_kennel,
        record_check_out=False,
        total_price=value,
    )
    audit_service.record_event(
        session,
        event_type="payment.recorded",
        salon_id=salon_id,
        appointment_id=appointment.id,
        actor_name=actor_name,
        description=f"{payment.payment_method.value} payment of {value}",
        payload={
            "amount": str(value),
            "payment_method": payment.payment_method.value,
            "from": previous.value,
            "to": appointment.status.value,
        },
    )
    await commit_or_raise(session, action="record payment")
    await session.refresh(payment)
    logger.info(
        "Recorded %s payment %s for appointment %s",
        payment.payment_method.value,
        payment.id,
        appointment.id,
    )

    change_feed.publish(
        salon_id,
        table="payments",
        change_type=ChangeType.INSERT,
        record_id=payment.id,
        operation="payment.recorded",
    )
    change_feed.publish(
        salon_id,
        table="appointments",
        change_type=ChangeType.UPDATE,
        record_id=appointment.id,
        operation="payment.recorded",
        old_status=previous.value,
        new_status=appointment.status.value,
    )
    return payment


async def list_payments(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID | None = None,
) -> Sequence[Payment]:
    stmt = select(Payment).where(Payment.salon_id == salon_id)
    if appointment_id is not None:
        stmt = stmt.where(Payment.appointment_id == appointment_id)
    result = await session.execute(stmt.order_by(Payment.payment_date.desc()))
    return result.scalars().all()
