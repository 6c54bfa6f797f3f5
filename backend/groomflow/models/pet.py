"""Pet profile model."""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groomflow.db.base import Base
from groomflow.models.kennel import SizeClass
from groomflow.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from groomflow.models.client import Client


class PetType(str, enum.Enum):
    """Supported pet categories."""

    DOG = "dog"
    CAT = "cat"
    OTHER = "other"


class Pet(TimestampMixin, Base):
    """A client's pet; its size drives kennel compatibility."""

    __tablename__ = "pets"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    salon_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("salons.id", ondelete="CASCADE"), nullable=False
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    pet_type: Mapped[PetType] = mapped_column(
        Enum(PetType), default=PetType.DOG, nullable=False
    )
    breed: Mapped[str | None] = mapped_column(String(120))
    size: Mapped[SizeClass | None] = mapped_column(Enum(SizeClass), nullable=True)
    age: Mapped[int | None] = mapped_column()
    weight: Mapped[Decimal | None] = mapped_column(Numeric(6, 2))
    notes: Mapped[str | None] = mapped_column(Text())
    special_instructions: Mapped[str | None] = mapped_column(Text())
    grooming_notes: Mapped[str | None] = mapped_column(Text())

    client: Mapped["Client"] = relationship("Client", back_populates="pets")
