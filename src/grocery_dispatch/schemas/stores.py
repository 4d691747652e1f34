"""Pydantic request/response models for store availability endpoints."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import StaffAssignment, Store, StoreAvailability
from ..services.availability.eta import estimate_delivery_minutes
from ..services.availability.staffing import effective_status

Latitude = Annotated[float, Field(ge=-90.0, le=90.0, allow_inf_nan=False)]
Longitude = Annotated[float, Field(ge=-180.0, le=180.0, allow_inf_nan=False)]


class StoreModel(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    latitude: float
    longitude: float
    is_active: bool
    cod_allowed: bool

    @classmethod
    def from_domain(cls, store: Store) -> "StoreModel":
        return cls(
            id=store.store_id,
            name=store.name,
            address=store.address,
            latitude=store.latitude,
            longitude=store.longitude,
            is_active=store.is_active,
            cod_allowed=store.cod_allowed,
        )


class StoreAvailabilityModel(BaseModel):
    store: StoreModel
    distance_km: Optional[float] = Field(None, description="Null when the store's coordinates are unusable.")
    has_online_picker: bool
    has_online_driver: bool
    is_available: bool
    estimated_delivery_minutes: Optional[int] = None

    @classmethod
    def from_domain(cls, result: StoreAvailability) -> "StoreAvailabilityModel":
        finite = math.isfinite(result.distance_km)
        return cls(
            store=StoreModel.from_domain(result.store),
            distance_km=result.distance_km if finite else None,
            has_online_picker=result.has_online_picker,
            has_online_driver=result.has_online_driver,
            is_available=result.is_available,
            estimated_delivery_minutes=estimate_delivery_minutes(result.distance_km) if finite else None,
        )


class CoverageResponse(BaseModel):
    available: bool
    message: Optional[str] = None
    store: Optional[StoreAvailabilityModel] = None
    estimated_delivery_minutes: Optional[int] = None
    cod_allowed: Optional[bool] = None
    stores: List[StoreAvailabilityModel] = Field(default_factory=list)


class NearbyStoresResponse(BaseModel):
    max_radius_km: float
    items: List[StoreAvailabilityModel]


class StaffAssignmentModel(BaseModel):
    id: str
    user_id: str
    store_id: str
    role: Literal["picker", "driver"]
    status: Literal["online", "offline"]
    last_status_change: Optional[datetime] = None

    @classmethod
    def from_domain(cls, assignment: StaffAssignment) -> "StaffAssignmentModel":
        return cls(
            id=assignment.assignment_id,
            user_id=assignment.user_id,
            store_id=assignment.store_id,
            role=assignment.role.value,
            status=effective_status(assignment.status).value,
            last_status_change=assignment.last_status_change,
        )


class StoreStaffResponse(BaseModel):
    store_id: str
    staff: List[StaffAssignmentModel]
    online_pickers: int
    online_drivers: int


class StoreActiveRequest(BaseModel):
    is_active: bool


class StaffStatusRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    status: Literal["online", "offline"]


class StaffStatusResponse(BaseModel):
    user_id: str
    status: Literal["online", "offline"]
    assignments: List[StaffAssignmentModel]
