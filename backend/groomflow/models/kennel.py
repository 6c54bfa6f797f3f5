"""Kennel inventory and size classes."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import Boolean, Enum, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from groomflow.db.base import Base
from groomflow.models.mixins import TimestampMixin


class SizeClass(str, enum.Enum):
    """Ordered size classes shared by pets and kennels."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra_large"

    @property
    def rank(self) -> int:
        return _SIZE_ORDER.index(self)


_SIZE_ORDER: list[SizeClass] = [
    SizeClass.SMALL,
    SizeClass.MEDIUM,
    SizeClass.LARGE,
    SizeClass.EXTRA_LARGE,
]


class Kennel(TimestampMixin, Base):
    """Physical housing unit that holds a checked-in pet."""

    __tablename__ = "kennels"
    __table_args__ = (
        UniqueConstraint("salon_id", "kennel_number", name="uq_kennels_salon_number"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    salon_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("salons.id", ondelete="CASCADE"), nullable=False
    )
    kennel_number: Mapped[str] = mapped_column(String(32), nullable=False)
    size_class: Mapped[SizeClass] = mapped_column(
        Enum(SizeClass), default=SizeClass.MEDIUM, nullable=False
    )
    is_occupied: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    current_appointment_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text())
