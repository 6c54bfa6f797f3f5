"""Kennel registry: inventory, size compatibility and occupancy.

Occupancy columns are written only through :func:`claim_kennel` and
:func:`release_kennel`, which the workflow engine calls inside its own
transaction. Administrative edits never touch them.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from groomflow.core.errors import InvalidStateError, KennelOccupiedError, NotFoundError
from groomflow.db.session import commit_or_raise
from groomflow.models import Appointment, Kennel, SizeClass
from groomflow.services import change_feed
from groomflow.services.change_feed import ChangeType

logger = logging.getLogger(__name__)


def compatible_kennel_sizes(pet_size: SizeClass | None) -> frozenset[SizeClass]:
    """Kennel sizes offered for a pet of ``pet_size``.

    Small pets only go in small kennels; every other size fits its own class
    or larger. A pet without a recorded size may use any kennel.
    """
    if pet_size is None:
        return frozenset(SizeClass)
    if pet_size is SizeClass.SMALL:
        return frozenset({SizeClass.SMALL})
    return frozenset(size for size in SizeClass if size.rank >= pet_size.rank)


def is_kennel_compatible(pet_size: SizeClass | None, kennel_size: SizeClass) -> bool:
    return kennel_size in compatible_kennel_sizes(pet_size)


def _kennel_query(salon_id: uuid.UUID):
    return (
        select(Kennel)
        .where(Kennel.salon_id == salon_id)
        .order_by(Kennel.kennel_number.asc())
        .execution_options(populate_existing=True)
    )


async def list_kennels(
    session: AsyncSession, *, salon_id: uuid.UUID
) -> Sequence[Kennel]:
    result = await session.execute(_kennel_query(salon_id))
    return result.scalars().all()


async def get_kennel(
    session: AsyncSession, *, salon_id: uuid.UUID, kennel_id: uuid.UUID
) -> Kennel:
    result = await session.execute(
        _kennel_query(salon_id).where(Kennel.id == kennel_id)
    )
    kennel = result.scalar_one_or_none()
    if kennel is None:
        raise NotFoundError("Kennel not found")
    return kennel


async def get_kennel_by_number(
    session: AsyncSession, *, salon_id: uuid.UUID, kennel_number: str
) -> Kennel:
    result = await session.execute(
        _kennel_query(salon_id).where(Kennel.kennel_number == kennel_number)
    )
    kennel = result.scalar_one_or_none()
    if kennel is None:
        raise NotFoundError(f"Kennel {kennel_number} not found")
    return kennel


async def list_available_kennels(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    appointment_id: uuid.UUID | None = None,
    pet_size: SizeClass | None = None,
) -> list[Kennel]:
    """Return free kennels, plus the one already held by ``appointment_id``.

    When ``pet_size`` is omitted and an appointment is given, the size of the
    appointment's pet is used for compatibility filtering.
    """
    if appointment_id is not None and pet_size is None:
        result = await session.execute(
            select(Appointment)
            .options(selectinload(Appointment.pet))
            .where(Appointment.id == appointment_id, Appointment.salon_id == salon_id)
        )
        appointment = result.scalar_one_or_none()
        if appointment is None:
            raise NotFoundError("Appointment not found")
        pet_size = appointment.pet.size

    free = Kennel.is_occupied.is_(False)
    if appointment_id is not None:
        free = or_(free, Kennel.current_appointment_id == appointment_id)
    allowed = compatible_kennel_sizes(pet_size)
    sizes = [size for size in SizeClass if size in allowed]
    stmt = _kennel_query(salon_id).where(free, Kennel.size_class.in_(sizes))
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def claim_kennel(
    session: AsyncSession, *, kennel: Kennel, appointment_id: uuid.UUID
) -> None:
    """Mark ``kennel`` occupied by ``appointment_id`` unless someone else holds it.

    The check and the write are one conditional UPDATE so concurrent check-ins
    cannot both claim the same kennel.
    """
    result = await session.execute(
        update(Kennel)
        .where(
            Kennel.id == kennel.id,
            or_(
                Kennel.is_occupied.is_(False),
                Kennel.current_appointment_id == appointment_id,
            ),
        )
        .values(is_occupied=True, current_appointment_id=appointment_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise KennelOccupiedError(
            f"Kennel {kennel.kennel_number} is occupied by another appointment"
        )


async def release_kennel(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    kennel_number: str,
    appointment_id: uuid.UUID,
) -> bool:
    """Free the salon's kennel ``kennel_number`` if ``appointment_id`` holds it."""
    result = await session.execute(
        update(Kennel)
        .where(
            Kennel.salon_id == salon_id,
            Kennel.kennel_number == kennel_number,
            or_(
                Kennel.current_appointment_id == appointment_id,
                Kennel.current_appointment_id.is_(None),
            ),
        )
        .values(is_occupied=False, current_appointment_id=None)
        .execution_options(synchronize_session=False)
    )
    released = result.rowcount > 0
    if not released:
        logger.warning(
            "Kennel %s was not held by appointment %s; left untouched",
            kennel_number,
            appointment_id,
        )
    return released


async def _ensure_number_free(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    kennel_number: str,
    exclude_kennel_id: uuid.UUID | None = None,
) -> None:
    stmt = select(Kennel.id).where(
        Kennel.salon_id == salon_id, Kennel.kennel_number == kennel_number
    )
    if exclude_kennel_id is not None:
        stmt = stmt.where(Kennel.id != exclude_kennel_id)
    if (await session.execute(stmt)).first() is not None:
        raise ValueError(f"Kennel number {kennel_number} already exists")


async def create_kennel(
    session: AsyncSession,
    *,
    salon_id: uuid.UUID,
    kennel_number: str,
    size_class: SizeClass = SizeClass.MEDIUM,
    notes: str | None = None,
) -> Kennel:
    kennel_number = kennel_number.strip()
    await _ensure_number_free(session, salon_id=salon_id, kennel_number=kennel_number)
    kennel = Kennel(
        salon_id=salon_id,
        kennel_number=kennel_number,
        size_class=size_class,
        is_occupied=False,
        notes=notes,
    )
    session.add(kennel)
    await commit_or_raise(session, action="create kennel")
    await session.refresh(kennel)
    change_feed.publish(
        salon_id,
        table="kennels",
        change_type=ChangeType.INSERT,
        record_id=kennel.id,
        operation="kennel.created",
    )
    return kennel


async def update_kennel(
    session: AsyncSession,
    *,
    kennel: Kennel,
    kennel_number: str | None = None,
    size_class: SizeClass | None = None,
    notes: str | None = None,
) -> Kennel:
    if kennel.is_occupied:
        raise InvalidStateError("Occupied kennels cannot be edited")
    if kennel_number is not None and kennel_number.strip() != kennel.kennel_number:
        await _ensure_number_free(
            session,
            salon_id=kennel.salon_id,
            kennel_number=kennel_number.strip(),
            exclude_kennel_id=kennel.id,
        )
        kennel.kennel_number = kennel_number.strip()
    if size_class is not None:
        kennel.size_class = size_class
    if notes is not None:
        kennel.notes = notes
    await commit_or_raise(session, action="update kennel")
    await session.refresh(kennel)
    change_feed.publish(
        kennel.salon_id,
        table="kennels",
        change_type=ChangeType.UPDATE,
        record_id=kennel.id,
        operation="kennel.updated",
    )
    return kennel


async def delete_kennel(session: AsyncSession, *, kennel: Kennel) -> None:
    if kennel.is_occupied:
        raise InvalidStateError("Occupied kennels cannot be deleted")
    salon_id, kennel_id = kennel.salon_id, kennel.id
    await session.delete(kennel)
    await commit_or_raise(session, action="delete kennel")
    change_feed.publish(
        salon_id,
        table="kennels",
        change_type=ChangeType.DELETE,
        record_id=kennel_id,
        operation="kennel.deleted",
    )
