"""Nearest-available-store selection over an injected store roster."""

from __future__ import annotations

import math
from typing import Callable, Iterable, Optional

from ...config import settings
from ...models.domain import OnlineStaffSnapshot, Store, StoreAvailability
from ..geospatial import distance_km
from .eta import is_within_delivery_radius

StoreProvider = Callable[[], Iterable[Store]]
StaffingProvider = Callable[[str], OnlineStaffSnapshot]


def _ranking_key(result: StoreAvailability) -> tuple[bool, float, str]:
    # Non-finite distances sort after every real one; equal distances fall back to store id.
    finite = math.isfinite(result.distance_km)
    return (not finite, result.distance_km if finite else 0.0, result.store.store_id)


class StoreAvailabilityRanker:
    """Ranks active stores by distance to a customer and live staffing.

    Both providers are called on every query, so results always reflect the
    roster at the instant of the request.
    """

    def __init__(
        self,
        store_provider: StoreProvider,
        staffing_provider: StaffingProvider,
        *,
        max_radius_km: float | None = None,
    ) -> None:
        self._store_provider = store_provider
        self._staffing_provider = staffing_provider
        self.max_radius_km = settings.max_delivery_radius_km if max_radius_km is None else max_radius_km
        if self.max_radius_km < 0:
            raise ValueError("max_radius_km must be >= 0")

    def _evaluate(self, store: Store, customer_lat: float, customer_lng: float) -> StoreAvailability:
        distance = distance_km(customer_lat, customer_lng, store.latitude, store.longitude)
        snapshot = self._staffing_provider(store.store_id)
        in_radius = math.isfinite(distance) and is_within_delivery_radius(distance, self.max_radius_km)
        return StoreAvailability(
            store=store,
            distance_km=distance,
            has_online_picker=snapshot.has_online_picker,
            has_online_driver=snapshot.has_online_driver,
            is_available=snapshot.has_online_picker and snapshot.has_online_driver and in_radius,
        )

    def _evaluate_active(self, customer_lat: float, customer_lng: float) -> list[StoreAvailability]:
        results = [
            self._evaluate(store, customer_lat, customer_lng)
            for store in self._store_provider()
            if store.is_active
        ]
        results.sort(key=_ranking_key)
        return results

    def get_stores_with_availability(self, customer_lat: float, customer_lng: float) -> list[StoreAvailability]:
        """Every active store annotated with distance and availability, nearest first."""

        return self._evaluate_active(customer_lat, customer_lng)

    def find_nearest_available_store(self, customer_lat: float, customer_lng: float) -> Optional[StoreAvailability]:
        """Nearest store that can serve the customer right now, or ``None`` when there is no coverage."""

        for result in self._evaluate_active(customer_lat, customer_lng):
            if result.is_available:
                return result
        return None
