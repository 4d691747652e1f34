"""Order dispatch planning: bind a new order to a store, a picker and a driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from ...models.domain import StaffAssignment, StoreAvailability
from ..availability.eta import estimate_delivery_minutes
from ..availability.ranker import StaffingProvider, StoreAvailabilityRanker

logger = logging.getLogger(__name__)

CASH_ON_DELIVERY = "cod"
DEFAULT_PAYMENT_METHOD = "online"


class PaymentMethodNotAllowedError(ValueError):
    """The selected store does not accept the requested payment method."""


class StaffUnavailableError(Exception):
    """The chosen store lost its online picker or driver before assignment."""


@dataclass(slots=True)
class DispatchPlan:
    store: StoreAvailability
    picker: StaffAssignment
    driver: StaffAssignment
    payment_method: str
    estimated_delivery_minutes: int
    estimated_delivery_at: datetime


def plan_order_dispatch(
    customer_lat: float,
    customer_lng: float,
    *,
    ranker: StoreAvailabilityRanker,
    staffing: StaffingProvider,
    payment_method: str | None = None,
    now: datetime | None = None,
) -> Optional[DispatchPlan]:
    """Select the nearest available store and the staff who will fulfil the order.

    Returns ``None`` when no store can serve the location. The first online
    picker and the first online driver (by assignment id) are assigned.
    Raises PaymentMethodNotAllowedError for cash on delivery at a store that
    does not accept it, and StaffUnavailableError when the store's staff went
    offline after it was ranked.
    """
    nearest = ranker.find_nearest_available_store(customer_lat, customer_lng)
    if nearest is None:
        logger.info(f"No store covers ({customer_lat:.5f}, {customer_lng:.5f})")
        return None

    method = (payment_method or DEFAULT_PAYMENT_METHOD).strip().lower()
    if method == CASH_ON_DELIVERY and not nearest.store.cod_allowed:
        raise PaymentMethodNotAllowedError(
            f"Cash on delivery is not available at store '{nearest.store.name}'."
        )

    # Staff may have gone offline between ranking and assignment.
    snapshot = staffing(nearest.store.store_id)
    if not snapshot.pickers or not snapshot.drivers:
        logger.warning(f"Store {nearest.store.store_id} lost its online staff before assignment")
        raise StaffUnavailableError(f"Store '{nearest.store.store_id}' has no online picker and driver.")

    minutes = estimate_delivery_minutes(nearest.distance_km)
    started = now or datetime.now(timezone.utc)
    plan = DispatchPlan(
        store=nearest,
        picker=snapshot.pickers[0],
        driver=snapshot.drivers[0],
        payment_method=method,
        estimated_delivery_minutes=minutes,
        estimated_delivery_at=started + timedelta(minutes=minutes),
    )
    logger.info(
        f"Dispatching to store {nearest.store.store_id} ({nearest.distance_km:.2f} km), "
        f"picker={plan.picker.user_id} driver={plan.driver.user_id} eta={minutes}min"
    )
    return plan
