"""Pydantic schemas for appointments and workflow actions."""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from groomflow.models.appointment import AppointmentStatus
from groomflow.schemas.client import ClientSummary
from groomflow.schemas.pet import PetSummary


class AppointmentCreate(BaseModel):
    """Payload for booking an appointment."""

    client_id: uuid.UUID
    pet_id: uuid.UUID
    scheduled_at: datetime
    service_ids: list[uuid.UUID] = Field(min_length=1)
    notes: str | None = None


class AppointmentUpdate(BaseModel):
    """Editable booking fields; ``service_ids`` replaces every service line."""

    client_id: uuid.UUID | None = None
    pet_id: uuid.UUID | None = None
    scheduled_at: datetime | None = None
    service_ids: list[uuid.UUID] | None = Field(default=None, min_length=1)


class AppointmentServiceRead(BaseModel):
    id: uuid.UUID
    service_id: uuid.UUID
    service_name: str
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class AppointmentRead(BaseModel):
    """Serialized appointment representation."""

    id: uuid.UUID
    salon_id: uuid.UUID
    client_id: uuid.UUID
    pet_id: uuid.UUID
    scheduled_at: datetime
    duration_minutes: int
    total_price: Decimal
    status: AppointmentStatus
    notes: str | None = None
    check_in_time: datetime | None = None
    checked_in_by: str | None = None
    check_out_time: datetime | None = None
    checked_out_by: str | None = None
    kennel_number: str | None = None
    kennel_notes: str | None = None
    created_at: datetime
    updated_at: datetime
    client: ClientSummary
    pet: PetSummary
    services: list[AppointmentServiceRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, appointment) -> "AppointmentRead":
        services = [
            AppointmentServiceRead(
                id=line.id,
                service_id=line.service_id,
                service_name=line.service.name,
                price=line.price,
            )
            for line in appointment.service_lines
        ]
        read = cls.model_validate(appointment)
        return read.model_copy(update={"services": services})


class CheckInRequest(BaseModel):
    """Payload for checking a pet in, optionally into a kennel."""

    kennel_number: str | None = Field(default=None, max_length=32)
    kennel_notes: str | None = None


class StatusChangeRequest(BaseModel):
    """Manual status changes available from the front desk."""

    status: AppointmentStatus


class NoteCreate(BaseModel):
    text: str = Field(min_length=1, max_length=2000)
