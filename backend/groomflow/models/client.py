"""Client (pet owner) records."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groomflow.db.base import Base
from groomflow.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from groomflow.models.pet import Pet


class Client(TimestampMixin, Base):
    """A salon customer who owns one or more pets."""

    __tablename__ = "clients"
    __table_args__ = (Index("ix_clients_salon_name", "salon_id", "name"),)

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    salon_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("salons.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320))
    phone: Mapped[str | None] = mapped_column(String(32))
    address: Mapped[str | None] = mapped_column(String(512))
    notes: Mapped[str | None] = mapped_column(Text())

    pets: Mapped[list["Pet"]] = relationship(
        "Pet", back_populates="client", cascade="all, delete-orphan"
    )
