"""Versioned API router."""

from fastapi import APIRouter

from . import (
    appointments,
    auth,
    changes,
    clients,
    health,
    kennels,
    payments,
    pets,
    salon,
    services,
    users,
)

_rate_limited = [auth.DEFAULT_RATE_DEP]

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(
    salon.router, prefix="/salon", tags=["salon"], dependencies=_rate_limited
)
router.include_router(
    users.router, prefix="/users", tags=["users"], dependencies=_rate_limited
)
router.include_router(
    clients.router, prefix="/clients", tags=["clients"], dependencies=_rate_limited
)
router.include_router(
    pets.router, prefix="/pets", tags=["pets"], dependencies=_rate_limited
)
router.include_router(
    services.router, prefix="/services", tags=["services"], dependencies=_rate_limited
)
router.include_router(
    appointments.router,
    prefix="/appointments",
    tags=["appointments"],
    dependencies=_rate_limited,
)
router.include_router(
    kennels.router, prefix="/kennels", tags=["kennels"], dependencies=_rate_limited
)
router.include_router(
    payments.router, prefix="/payments", tags=["payments"], dependencies=_rate_limited
)
router.include_router(changes.router, prefix="/changes", tags=["changes"])

__all__ = ["router"]
