"""Salon profile and contact settings."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.core.errors import NotFoundError
from groomflow.db.session import commit_or_raise
from groomflow.models import Salon
from groomflow.schemas.salon import SalonSettingsUpdate
from groomflow.services import change_feed
from groomflow.services.change_feed import ChangeType

logger = logging.getLogger(__name__)


async def get_salon(session: AsyncSession, *, salon_id: uuid.UUID) -> Salon:
    salon = await session.get(Salon, salon_id, populate_existing=True)
    if salon is None:
        raise NotFoundError("Salon not found")
    return salon


async def update_salon_settings(
    session: AsyncSession, *, salon_id: uuid.UUID, payload: SalonSettingsUpdate
) -> Salon:
    """Replace the salon's name and contact details; the slug never changes."""
    values = {
        field: (value.strip() or None) if isinstance(value, str) else value
        for field, value in payload.model_dump().items()
    }
    if not values["name"]:
        raise ValueError("Salon name must not be blank")
    salon = await get_salon(session, salon_id=salon_id)
    for field, value in values.items():
        setattr(salon, field, value)
    await commit_or_raise(session, action="update salon settings")
    await session.refresh(salon)
    logger.info("Updated settings for salon %s", salon.id)
    change_feed.publish(
        salon.id,
        table="salons",
        change_type=ChangeType.UPDATE,
        record_id=salon.id,
        operation="salon.settings_updated",
    )
    return salon
