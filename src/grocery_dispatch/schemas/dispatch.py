"""Order dispatch and driver tracking schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .stores import Latitude, Longitude, StoreAvailabilityModel


class DispatchRequest(BaseModel):
    customer_lat: Latitude
    customer_lng: Longitude
    payment_method: Optional[str] = Field(default=None, description="'cod' or an online method; defaults to online.")


class DispatchResponse(BaseModel):
    available: bool
    reason: Optional[Literal["no_coverage", "no_staff"]] = None
    message: Optional[str] = None
    store: Optional[StoreAvailabilityModel] = None
    picker_id: Optional[str] = None
    driver_id: Optional[str] = None
    payment_method: Optional[str] = None
    estimated_delivery_minutes: Optional[int] = None
    estimated_delivery_at: Optional[datetime] = None
    stores: List[StoreAvailabilityModel] = Field(default_factory=list)


class ProximityRequest(BaseModel):
    driver_lat: Latitude
    driver_lng: Longitude
    customer_lat: Latitude
    customer_lng: Longitude
    threshold_m: Optional[float] = Field(default=None, ge=0.0)


class ProximityResponse(BaseModel):
    distance_m: int
    is_nearby: bool
    eta_minutes: int
