"""Driver proximity checks for arrival alerts."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...schemas.dispatch import ProximityRequest, ProximityResponse
from ...services.tracking.proximity import evaluate_driver_proximity

router = APIRouter(prefix="/tracking", tags=["tracking"])


@router.post("/proximity", response_model=ProximityResponse, status_code=status.HTTP_200_OK)
def driver_proximity(payload: ProximityRequest) -> ProximityResponse:
    result = evaluate_driver_proximity(
        (payload.driver_lat, payload.driver_lng),
        (payload.customer_lat, payload.customer_lng),
        threshold_m=payload.threshold_m,
    )
    return ProximityResponse(
        distance_m=result.display_distance_m,
        is_nearby=result.is_nearby,
        eta_minutes=result.eta_minutes,
    )
