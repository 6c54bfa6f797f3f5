"""Salon settings schemas."""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SalonSettingsUpdate(BaseModel):
    """Full replacement of the salon's name and contact details."""

    name: str = Field(min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    email: EmailStr | None = None
    address: str | None = Field(default=None, max_length=512)
    website: str | None = Field(default=None, max_length=255)


class SalonSettingsRead(BaseModel):
    id: uuid.UUID
    slug: str
    name: str
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    website: str | None = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
