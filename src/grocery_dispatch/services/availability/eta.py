"""Delivery time heuristics."""

from __future__ import annotations

import math

from ...config import settings


def is_within_delivery_radius(distance_km: float, max_radius_km: float | None = None) -> bool:
    radius = settings.max_delivery_radius_km if max_radius_km is None else max_radius_km
    # NaN compares False, so malformed distances are never deliverable
    return distance_km <= radius


def estimate_delivery_minutes(
    distance_km: float,
    *,
    base_picking_minutes: int | None = None,
    speed_km_per_minute: float | None = None,
) -> int:
    """Estimate minutes from order to doorstep.

    ``base_picking_minutes + ceil(distance_km / speed_km_per_minute)``. Negative
    distances contribute no travel time.
    """

    base = settings.base_picking_minutes if base_picking_minutes is None else base_picking_minutes
    speed = settings.average_speed_km_per_minute if speed_km_per_minute is None else speed_km_per_minute
    if speed <= 0:
        raise ValueError("speed_km_per_minute must be > 0")
    if not math.isfinite(distance_km):
        raise ValueError(f"distance_km must be finite, got {distance_km!r}")

    travel_minutes = math.ceil(max(distance_km, 0.0) / speed)
    return int(base + travel_minutes)
