"""Supabase access for the subscription ``users`` table."""

from __future__ import annotations

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)

USERS_TABLE = "users"


class SupabaseNotConfiguredError(RuntimeError):
    """Supabase URL or key is missing."""


@lru_cache()
def get_supabase_client() -> Client | None:
    """Cached client, or None when credentials are absent or the client cannot be built."""
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase credentials not configured (missing URL or key)")
        return None
    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None


def users_table(client: Client | None):
    """Query builder for the users table; raises when no client is available."""
    if client is None:
        raise SupabaseNotConfiguredError(
            "Supabase not configured. Set ROUTEPLANNER_SUPABASE_URL and ROUTEPLANNER_SUPABASE_KEY."
        )
    return client.table(USERS_TABLE)


def check_connection(client: Client | None) -> dict:
    if client is None:
        return {
            "configured": False,
            "message": "Supabase not configured. Set ROUTEPLANNER_SUPABASE_URL and ROUTEPLANNER_SUPABASE_KEY environment variables.",
        }
    try:
        users_table(client).select("id", count="exact").limit(1).execute()
        return {"configured": True, "connected": True, "message": "Database connected."}
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
