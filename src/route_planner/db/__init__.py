"""Database clients and utilities."""

from .supabase import SupabaseNotConfiguredError, check_connection, get_supabase_client, users_table

__all__ = ["SupabaseNotConfiguredError", "check_connection", "get_supabase_client", "users_table"]
