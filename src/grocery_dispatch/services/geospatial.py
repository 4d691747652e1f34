"""Geospatial helper functions."""

from __future__ import annotations

import math

EARTH_RADIUS_M = 6_371_000.0
EARTH_RADIUS_KM = EARTH_RADIUS_M / 1000.0


def haversine(lat1: float, lon1: float, lat2: float, lon2: float, *, radius: float = EARTH_RADIUS_M) -> float:
    """Great-circle distance between two coordinates, in the unit of ``radius``.

    No rounding is applied. Non-finite input yields a non-finite result.
    """

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius * c


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in kilometers using the Haversine formula."""

    return haversine(lat1, lon1, lat2, lon2, radius=EARTH_RADIUS_KM)


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in meters using the Haversine formula."""

    return haversine(lat1, lon1, lat2, lon2, radius=EARTH_RADIUS_M)
