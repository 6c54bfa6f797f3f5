"""Kennel schemas."""
from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field

from groomflow.models.kennel import SizeClass


class KennelCreate(BaseModel):
    """Payload for adding a kennel."""

    kennel_number: str = Field(min_length=1, max_length=32)
    size_class: SizeClass = SizeClass.MEDIUM
    notes: str | None = None


class KennelUpdate(BaseModel):
    kennel_number: str | None = Field(default=None, min_length=1, max_length=32)
    size_class: SizeClass | None = None
    notes: str | None = None


class KennelRead(BaseModel):
    id: uuid.UUID
    salon_id: uuid.UUID
    kennel_number: str
    size_class: SizeClass
    is_occupied: bool
    current_appointment_id: uuid.UUID | None = None
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)
