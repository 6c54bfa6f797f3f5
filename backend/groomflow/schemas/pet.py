"""Pet schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from groomflow.models.kennel import SizeClass
from groomflow.models.pet import PetType


class PetBase(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    pet_type: PetType = PetType.DOG
    breed: str | None = None
    size: SizeClass | None = None
    age: int | None = Field(default=None, ge=0)
    weight: Decimal | None = Field(default=None, ge=Decimal("0"))
    notes: str | None = None
    special_instructions: str | None = None
    grooming_notes: str | None = None


class PetCreate(PetBase):
    """Payload for creating a pet."""

    client_id: uuid.UUID


class PetUpdate(BaseModel):
    """Mutable pet fields."""

    name: str | None = Field(default=None, min_length=1, max_length=120)
    pet_type: PetType | None = None
    breed: str | None = None
    size: SizeClass | None = None
    age: int | None = Field(default=None, ge=0)
    weight: Decimal | None = Field(default=None, ge=Decimal("0"))
    notes: str | None = None
    special_instructions: str | None = None
    grooming_notes: str | None = None


class PetRead(PetBase):
    id: uuid.UUID
    salon_id: uuid.UUID
    client_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PetSummary(BaseModel):
    """Compact pet shape embedded in appointments."""

    id: uuid.UUID
    name: str
    pet_type: PetType
    breed: str | None = None
    size: SizeClass | None = None

    model_config = ConfigDict(from_attributes=True)
