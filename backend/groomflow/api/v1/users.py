"""Staff user endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from groomflow.api import deps
from groomflow.core.errors import GroomFlowError
from groomflow.models.user import User, UserRole
from groomflow.schemas.user import UserCreate, UserRead, UserUpdate
from groomflow.services import user_service

router = APIRouter()


def _assert_assignable_role(actor: User, target_role: UserRole) -> None:
    if target_role == UserRole.ADMIN and actor.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Cannot assign higher role"
        )


@router.get("/me", response_model=UserRead, summary="Current user profile")
async def read_current_user(
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> UserRead:
    """Return the authenticated user's profile."""
    return UserRead.model_validate(current_user)


@router.get("", response_model=list[UserRead], summary="List salon staff")
async def list_users(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
    skip: int = 0,
    limit: int = 50,
) -> list[UserRead]:
    users = await user_service.list_users(
        session, salon_id=current_user.salon_id, skip=skip, limit=min(limit, 100)
    )
    return [UserRead.model_validate(obj) for obj in users]


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create staff user",
)
async def create_user(
    payload: UserCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> UserRead:
    """Create a staff user in the current salon."""
    _assert_assignable_role(current_user, payload.role)
    try:
        user = await user_service.create_user(
            session, salon_id=current_user.salon_id, payload=payload
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return UserRead.model_validate(user)


@router.patch("/{user_id}", response_model=UserRead, summary="Edit staff user")
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.require_manager)],
) -> UserRead:
    """Edit a staff profile; setting ``status`` to suspended revokes access."""
    try:
        user = await user_service.get_user(
            session, salon_id=current_user.salon_id, user_id=user_id
        )
    except GroomFlowError as exc:
        raise deps.translate_domain_error(exc) from exc
    _assert_assignable_role(current_user, user.role)
    if payload.role is not None:
        _assert_assignable_role(current_user, payload.role)
    try:
        user = await user_service.update_user(session, user=user, payload=payload)
    except ValueError as exc:
        raise deps.translate_domain_error(exc) from exc
    return UserRead.model_validate(user)
