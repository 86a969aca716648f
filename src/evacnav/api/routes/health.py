"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok", "service": settings.app_name}


def _get_routing_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.valhalla_client import check_health as routing_health_check
    return routing_health_check


@router.get("/health/routing", status_code=status.HTTP_200_OK)
def health_routing() -> dict:
    """Check routing engine reachability."""
    if not settings.resolved_routing_base_url:
        return {"service": "routing", "healthy": False, "error": "Routing base URL is not configured."}
    routing_health_check = _get_routing_health_check()
    return {"service": "routing", "healthy": routing_health_check()}
