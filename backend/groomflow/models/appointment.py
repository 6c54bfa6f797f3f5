"""Appointment lifecycle models."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groomflow.db.base import Base
from groomflow.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from groomflow.models.client import Client
    from groomflow.models.pet import Pet
    from groomflow.models.service import Service


class AppointmentStatus(str, enum.Enum):
    """Lifecycle states for grooming appointments."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    ON_HOLD = "on_hold"
    CHECKED_IN = "checked_in"
    IN_PROGRESS = "in_progress"
    READY_FOR_PICKUP = "ready_for_pickup"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


OCCUPYING_STATUSES: frozenset[AppointmentStatus] = frozenset(
    {
        AppointmentStatus.CHECKED_IN,
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.READY_FOR_PICKUP,
    }
)


class Appointment(TimestampMixin, Base):
    """One scheduled grooming engagement for a pet."""

    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_salon_scheduled", "salon_id", "scheduled_at"),
        Index("ix_appointments_salon_status", "salon_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    salon_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("salons.id", ondelete="CASCADE"), nullable=False
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    pet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"), nullable=False
    )
    scheduled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    duration_minutes: Mapped[int] = mapped_column(nullable=False, default=0)
    total_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus), default=AppointmentStatus.SCHEDULED, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text())
    check_in_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    checked_in_by: Mapped[str | None] = mapped_column(String(255))
    check_out_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    checked_out_by: Mapped[str | None] = mapped_column(String(255))
    kennel_number: Mapped[str | None] = mapped_column(String(32))
    kennel_notes: Mapped[str | None] = mapped_column(Text())

    client: Mapped["Client"] = relationship("Client")
    pet: Mapped["Pet"] = relationship("Pet")
    service_lines: Mapped[list["AppointmentService"]] = relationship(
        "AppointmentService",
        back_populates="appointment",
        cascade="all, delete-orphan",
        order_by="AppointmentService.created_at",
    )


class AppointmentService(TimestampMixin, Base):
    """Service booked on an appointment with the price captured at booking."""

    __tablename__ = "appointment_services"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    appointment_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("appointments.id", ondelete="CASCADE"), nullable=False
    )
    service_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("services.id", ondelete="RESTRICT"), nullable=False
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    appointment: Mapped["Appointment"] = relationship(
        "Appointment", back_populates="service_lines"
    )
    service: Mapped["Service"] = relationship("Service")
