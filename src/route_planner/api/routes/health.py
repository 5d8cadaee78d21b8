"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/ranking", status_code=status.HTTP_200_OK)
def health_ranking() -> dict:
    """Check the external directions service used for stop ranking."""
    if not settings.ranking_enabled:
        return {"service": "ranking", "enabled": False, "healthy": False}
    try:
        from ...services.routing.ranking_client import DirectionsRankingClient

        return {"service": "ranking", "enabled": True, "healthy": DirectionsRankingClient().check_health()}
    except Exception as e:
        return {"service": "ranking", "enabled": True, "healthy": False, "error": str(e)}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check the Supabase connection used for subscriptions."""
    from ...db.supabase import check_connection, get_supabase_client

    return check_connection(get_supabase_client())
