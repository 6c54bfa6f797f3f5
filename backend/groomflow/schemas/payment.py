"""Payment schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from groomflow.models.payment import PaymentMethod, PaymentStatus


class PaymentCreate(BaseModel):
    """Payload for recording a payment against an appointment."""

    appointment_id: uuid.UUID
    amount: Decimal = Field(gt=Decimal("0"))
    payment_method: PaymentMethod
    transaction_id: str | None = None
    notes: str | None = None


class PaymentRead(BaseModel):
    id: uuid.UUID
    salon_id: uuid.UUID
    appointment_id: uuid.UUID | None = None
    amount: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    transaction_id: str | None = None
    notes: str | None = None
    payment_date: datetime

    model_config = ConfigDict(from_attributes=True)
