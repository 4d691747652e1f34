"""Wires the ranker to the live roster repository."""

from __future__ import annotations

from ...data import roster_repository
from .ranker import StoreAvailabilityRanker
from .staffing import StaffingSnapshotResolver


def build_staffing_resolver() -> StaffingSnapshotResolver:
    return StaffingSnapshotResolver(lambda store_id: roster_repository.load_staff_for_store(store_id))


def build_ranker(max_radius_km: float | None = None) -> StoreAvailabilityRanker:
    """Ranker reading stores and staff from the configured roster source on every query."""
    return StoreAvailabilityRanker(
        lambda: roster_repository.load_active_stores(),
        build_staffing_resolver(),
        max_radius_km=max_radius_km,
    )


# FastAPI dependencies; overridden with fixture rosters in tests.
def get_ranker() -> StoreAvailabilityRanker:
    return build_ranker()


def get_staffing() -> StaffingSnapshotResolver:
    return build_staffing_resolver()
