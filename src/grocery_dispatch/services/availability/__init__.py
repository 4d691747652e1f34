"""Store availability matching."""

from .eta import estimate_delivery_minutes, is_within_delivery_radius
from .ranker import StoreAvailabilityRanker
from .staffing import StaffingSnapshotResolver, effective_status, online_staff_snapshot

__all__ = [
    "StoreAvailabilityRanker",
    "StaffingSnapshotResolver",
    "effective_status",
    "estimate_delivery_minutes",
    "is_within_delivery_radius",
    "online_staff_snapshot",
]
