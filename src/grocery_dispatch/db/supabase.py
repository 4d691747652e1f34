"""Supabase client for Python backend."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings


class SupabaseClientError(ConnectionError):
    """Supabase credentials are set but the client could not be built."""


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Raises SupabaseClientError when configured but construction fails;
        the failure is not cached, so the next call retries.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.info("Supabase credentials not configured (missing URL or key); using roster workbook")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
        return client
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        raise SupabaseClientError(f"Failed to create Supabase client: {e}") from e


# Table layout consumed by the roster repository:
#
# stores(id, name, address, latitude numeric(10,7), longitude numeric(10,7),
#        owner_id, cod_allowed bool, is_active bool, created_at)
# store_staff(id, user_id, store_id, role 'picker'|'driver',
#             status 'online'|'offline', last_status_change, created_at)
#
# from .db.supabase import get_supabase_client
#
# supabase = get_supabase_client()
# result = supabase.table('store_staff') \
#     .select('*') \
#     .eq('store_id', store_id) \
#     .execute()
