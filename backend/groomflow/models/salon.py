"""Salon model representing a tenant."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groomflow.db.base import Base
from groomflow.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from groomflow.models.user import User


class Salon(TimestampMixin, Base):
    """A grooming business; every other row is scoped to exactly one salon."""

    __tablename__ = "salons"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    # Contact details shown on confirmations and receipts.
    phone: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(String(320))
    address: Mapped[str | None] = mapped_column(String(512))
    website: Mapped[str | None] = mapped_column(String(255))

    users: Mapped[list["User"]] = relationship(
        "User", back_populates="salon", cascade="all, delete-orphan"
    )
