"""API routes for store listing, coverage checks and store staffing."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...data import roster_repository
from ...data.roster_repository import RosterUnavailableError
from ...schemas.stores import (
    CoverageResponse,
    NearbyStoresResponse,
    StaffAssignmentModel,
    StoreActiveRequest,
    StoreAvailabilityModel,
    StoreModel,
    StoreStaffResponse,
)
from ...services.availability.eta import estimate_delivery_minutes
from ...services.availability.ranker import StoreAvailabilityRanker
from ...services.availability.roster import get_ranker
from ...services.availability.staffing import online_staff_snapshot

router = APIRouter(prefix="/stores", tags=["stores"])

NO_COVERAGE_MESSAGE = "No stores available in your area"


def roster_unavailable(exc: RosterUnavailableError) -> HTTPException:
    logging.error(f"Roster unavailable: {exc}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Store roster is temporarily unavailable. Please try again shortly.",
    )


@router.get("", response_model=list[StoreModel], status_code=status.HTTP_200_OK)
def list_stores() -> list[StoreModel]:
    try:
        stores = roster_repository.load_stores()
    except RosterUnavailableError as exc:
        raise roster_unavailable(exc) from exc
    return [StoreModel.from_domain(store) for store in stores]


@router.get("/available", response_model=CoverageResponse, status_code=status.HTTP_200_OK)
def check_coverage(
    lat: float = Query(..., ge=-90.0, le=90.0, allow_inf_nan=False),
    lng: float = Query(..., ge=-180.0, le=180.0, allow_inf_nan=False),
    ranker: StoreAvailabilityRanker = Depends(get_ranker),
) -> CoverageResponse:
    """Tell the customer whether their pinned location can be served right now.

    Lack of coverage is a normal 200 response with ``available: false`` and
    the ranked store list, so the client can say how far the closest store is.
    """
    try:
        nearest = ranker.find_nearest_available_store(lat, lng)
        if nearest is None:
            ranked = ranker.get_stores_with_availability(lat, lng)
            return CoverageResponse(
                available=False,
                message=NO_COVERAGE_MESSAGE,
                stores=[StoreAvailabilityModel.from_domain(item) for item in ranked],
            )
    except RosterUnavailableError as exc:
        raise roster_unavailable(exc) from exc

    return CoverageResponse(
        available=True,
        store=StoreAvailabilityModel.from_domain(nearest),
        estimated_delivery_minutes=estimate_delivery_minutes(nearest.distance_km),
        cod_allowed=nearest.store.cod_allowed,
    )


@router.get("/nearby", response_model=NearbyStoresResponse, status_code=status.HTTP_200_OK)
def nearby_stores(
    lat: float = Query(..., ge=-90.0, le=90.0, allow_inf_nan=False),
    lng: float = Query(..., ge=-180.0, le=180.0, allow_inf_nan=False),
    ranker: StoreAvailabilityRanker = Depends(get_ranker),
) -> NearbyStoresResponse:
    """Every active store, nearest first, including those outside the delivery zone."""
    try:
        ranked = ranker.get_stores_with_availability(lat, lng)
    except RosterUnavailableError as exc:
        raise roster_unavailable(exc) from exc
    return NearbyStoresResponse(
        max_radius_km=ranker.max_radius_km,
        items=[StoreAvailabilityModel.from_domain(item) for item in ranked],
    )


@router.get("/{store_id}/staff", response_model=StoreStaffResponse, status_code=status.HTTP_200_OK)
def store_staff(store_id: str) -> StoreStaffResponse:
    try:
        if roster_repository.get_store(store_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Store '{store_id}' not found")
        staff = roster_repository.load_staff_for_store(store_id)
    except RosterUnavailableError as exc:
        raise roster_unavailable(exc) from exc

    snapshot = online_staff_snapshot(store_id, staff)
    return StoreStaffResponse(
        store_id=store_id,
        staff=[StaffAssignmentModel.from_domain(item) for item in staff],
        online_pickers=snapshot.picker_count,
        online_drivers=snapshot.driver_count,
    )


@router.post("/{store_id}/active", response_model=StoreModel, status_code=status.HTTP_200_OK)
def set_store_active(store_id: str, payload: StoreActiveRequest) -> StoreModel:
    try:
        store = roster_repository.set_store_active(store_id, payload.is_active)
    except RosterUnavailableError as exc:
        raise roster_unavailable(exc) from exc
    if store is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Store '{store_id}' not found")
    return StoreModel.from_domain(store)
