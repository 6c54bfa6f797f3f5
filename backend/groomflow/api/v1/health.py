"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter

from groomflow.core.config import get_settings
from groomflow.services import change_feed

router = APIRouter()


@router.get("", summary="Service health status")
async def healthcheck() -> dict[str, str]:
    """Return application health metadata."""
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.app_name,
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": settings.app_env,
        "change_feed_subscribers": str(change_feed.total_subscribers()),
    }
