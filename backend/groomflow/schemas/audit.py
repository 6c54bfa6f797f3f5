"""Audit event schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditEventRead(BaseModel):
    id: uuid.UUID
    appointment_id: uuid.UUID | None = None
    actor_name: str | None = None
    event_type: str
    description: str | None = None
    payload: dict[str, Any] | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
