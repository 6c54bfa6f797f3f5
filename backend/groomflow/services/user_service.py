"""Staff user data access helpers."""
from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.core.errors import NotFoundError
from groomflow.core.security import get_password_hash
from groomflow.models.user import User
from groomflow.schemas.user import UserCreate, UserUpdate


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Return a user by email address."""
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def list_users(
    session: AsyncSession, *, salon_id: uuid.UUID, skip: int = 0, limit: int = 50
) -> Sequence[User]:
    """Return a page of the salon's staff."""
    result = await session.execute(
        select(User)
        .where(User.salon_id == salon_id)
        .order_by(User.last_name.asc(), User.first_name.asc())
        .offset(skip)
        .limit(limit)
    )
    return result.scalars().all()


async def create_user(
    session: AsyncSession, *, salon_id: uuid.UUID, payload: UserCreate
) -> User:
    """Persist a new staff user with a hashed password."""
    user = User(
        salon_id=salon_id,
        email=payload.email.lower(),
        hashed_password=get_password_hash(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone_number=payload.phone_number,
        role=payload.role,
        status=payload.status,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ValueError("A user with that email already exists") from exc
    await session.refresh(user)
    return user


async def get_user(
    session: AsyncSession, *, salon_id: uuid.UUID, user_id: uuid.UUID
) -> User:
    user = await session.get(User, user_id)
    if user is None or user.salon_id != salon_id:
        raise NotFoundError("User not found")
    return user


async def update_user(session: AsyncSession, *, user: User, payload: UserUpdate) -> User:
    """Apply profile, role and status changes; a new password is re-hashed."""
    changes = payload.model_dump(exclude_unset=True)
    password = changes.pop("password", None)
    if password:
        user.hashed_password = get_password_hash(password)
    if changes.get("email"):
        changes["email"] = changes["email"].lower()
    for field in ("email", "first_name", "last_name", "role", "status"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    for field, value in changes.items():
        setattr(user, field, value)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ValueError("A user with that email already exists") from exc
    await session.refresh(user)
    return user
