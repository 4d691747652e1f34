"""Driver-to-customer proximity for arrival alerts."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ...config import settings
from ..geospatial import distance_meters


@dataclass(slots=True)
class ProximityResult:
    distance_m: float
    display_distance_m: int
    is_nearby: bool
    eta_minutes: int


def evaluate_driver_proximity(
    driver: tuple[float, float],
    customer: tuple[float, float],
    *,
    threshold_m: float | None = None,
    speed_km_per_minute: float | None = None,
) -> ProximityResult:
    """Distance from the driver to the customer and whether an arrival alert is due.

    ``driver`` and ``customer`` are (lat, lon) pairs.
    """
    threshold = settings.proximity_alert_radius_m if threshold_m is None else threshold_m
    speed = settings.driver_speed_km_per_minute if speed_km_per_minute is None else speed_km_per_minute
    if speed <= 0:
        raise ValueError("speed_km_per_minute must be > 0")

    meters = distance_meters(driver[0], driver[1], customer[0], customer[1])
    if not math.isfinite(meters):
        raise ValueError("driver and customer coordinates must be finite")

    return ProximityResult(
        distance_m=meters,
        display_distance_m=int(round(meters)),
        is_nearby=meters <= threshold,
        eta_minutes=math.ceil((meters / 1000.0) / speed),
    )
