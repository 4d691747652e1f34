"""Database clients and utilities."""

from .supabase import SupabaseClientError, get_supabase_client

__all__ = ["SupabaseClientError", "get_supabase_client"]
