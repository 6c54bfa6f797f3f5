"""Payment records captured against appointments."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from groomflow.db.base import Base
from groomflow.models.mixins import TimestampMixin, utcnow


class PaymentMethod(str, enum.Enum):
    """Tender types accepted at the front desk."""

    CASH = "cash"
    CARD = "card"
    STRIPE = "stripe"
    SQUARE = "square"
    PAYPAL = "paypal"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"


class PaymentStatus(str, enum.Enum):
    """Settlement state of a recorded payment."""

    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class Payment(TimestampMixin, Base):
    """Funds captured for an appointment. Rows are never updated."""

    __tablename__ = "payments"
    __table_args__ = (Index("ix_payments_salon_date", "salon_id", "payment_date"),)

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    salon_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("salons.id", ondelete="CASCADE"), nullable=False
    )
    appointment_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod), nullable=False
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), default=PaymentStatus.COMPLETED, nullable=False
    )
    transaction_id: Mapped[str | None] = mapped_column(String(255))
    notes: Mapped[str | None] = mapped_column(Text())
    payment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
