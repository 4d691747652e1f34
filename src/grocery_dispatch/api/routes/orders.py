"""API routes for binding new orders to a store and its staff."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...data.roster_repository import RosterUnavailableError
from ...schemas.dispatch import DispatchRequest, DispatchResponse
from ...schemas.stores import StoreAvailabilityModel
from ...services.availability.ranker import StoreAvailabilityRanker
from ...services.availability.roster import get_ranker, get_staffing
from ...services.availability.staffing import StaffingSnapshotResolver
from ...services.dispatch.service import (
    PaymentMethodNotAllowedError,
    StaffUnavailableError,
    plan_order_dispatch,
)
from .stores import roster_unavailable

router = APIRouter(prefix="/orders", tags=["orders"])

NO_DELIVERY_MESSAGE = "Sorry, no stores are available in your area right now. Please try again later."
NO_STAFF_MESSAGE = "Sorry, no pickers or drivers are available at the moment. Please try again later."


@router.post("/dispatch", response_model=DispatchResponse, status_code=status.HTTP_200_OK)
def dispatch_order(
    payload: DispatchRequest,
    ranker: StoreAvailabilityRanker = Depends(get_ranker),
    staffing: StaffingSnapshotResolver = Depends(get_staffing),
) -> DispatchResponse:
    """Pick the store, picker and driver for a new order.

    No coverage is answered with 200 and ``available: false``; an unreachable
    roster is a 503 so the client can tell "not here yet" from "try again".
    """
    try:
        plan = plan_order_dispatch(
            payload.customer_lat,
            payload.customer_lng,
            ranker=ranker,
            staffing=staffing,
            payment_method=payload.payment_method,
        )
        if plan is None:
            ranked = ranker.get_stores_with_availability(payload.customer_lat, payload.customer_lng)
            return DispatchResponse(
                available=False,
                reason="no_coverage",
                message=NO_DELIVERY_MESSAGE,
                stores=[StoreAvailabilityModel.from_domain(item) for item in ranked],
            )
    except StaffUnavailableError:
        return DispatchResponse(available=False, reason="no_staff", message=NO_STAFF_MESSAGE)
    except PaymentMethodNotAllowedError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RosterUnavailableError as exc:
        raise roster_unavailable(exc) from exc

    return DispatchResponse(
        available=True,
        store=StoreAvailabilityModel.from_domain(plan.store),
        picker_id=plan.picker.user_id,
        driver_id=plan.driver.user_id,
        payment_method=plan.payment_method,
        estimated_delivery_minutes=plan.estimated_delivery_minutes,
        estimated_delivery_at=plan.estimated_delivery_at,
    )
