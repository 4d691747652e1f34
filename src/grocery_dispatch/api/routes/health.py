"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/roster", status_code=status.HTTP_200_OK)
def check_roster() -> dict:
    """Check that the store roster can be read from its configured source."""
    from ...data.roster_repository import RosterUnavailableError, load_stores, roster_source

    # A configured but unbuildable Supabase client still reports as "supabase".
    source = "supabase" if settings.supabase_url and settings.supabase_key else "workbook"
    try:
        source = roster_source()
        stores = load_stores()
    except RosterUnavailableError as exc:
        return {
            "source": source,
            "healthy": False,
            "error": str(exc),
            "message": f"Roster source '{source}' is unavailable: {exc}",
        }
    active = sum(1 for store in stores if store.is_active)
    return {
        "source": source,
        "healthy": True,
        "stores_count": len(stores),
        "active_stores_count": active,
    }
