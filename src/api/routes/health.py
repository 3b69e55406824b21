"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.v1.dependencies import get_notification_poller
from core.config import settings
from domain.services.notification_poller import NotificationPoller

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    notification_poller: str | None = None
    last_polled_at: str | None = None


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without checking dependencies. Fast and lightweight.
    """
    return HealthResponse(
        status="healthy",
        version="1.0.0",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    poller: NotificationPoller = Depends(get_notification_poller),
) -> HealthResponse:
    """
    Detailed health check including the notification poll loop.

    Reports ``degraded`` when polling is enabled but the loop is not running.
    """
    if poller.is_running:
        poller_status = "running"
    elif settings.notification_polling_enabled:
        poller_status = "stopped"
    else:
        poller_status = "disabled"

    overall_status = "degraded" if poller_status == "stopped" else "healthy"

    return HealthResponse(
        status=overall_status,
        version="1.0.0",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.app_env,
        notification_poller=poller_status,
        last_polled_at=poller.last_polled_at.isoformat() if poller.last_polled_at else None,
    )
