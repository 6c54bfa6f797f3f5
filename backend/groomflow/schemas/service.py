"""Service catalog schemas."""
from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ServiceBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(ge=Decimal("0"))
    duration_minutes: int = Field(gt=0)
    is_active: bool = True


class ServiceCreate(ServiceBase):
    """Payload for adding a catalog entry."""


class ServiceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=Decimal("0"))
    duration_minutes: int | None = Field(default=None, gt=0)
    is_active: bool | None = None


class ServiceRead(ServiceBase):
    id: uuid.UUID
    salon_id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)
