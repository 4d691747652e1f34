"""Domain models for stores, staff assignments and computed availability."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class StaffRole(str, Enum):
    PICKER = "picker"
    DRIVER = "driver"


class StaffStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


@dataclass(slots=True)
class Store:
    """A fulfillment location with fixed coordinates."""

    store_id: str
    name: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    is_active: bool = True
    cod_allowed: bool = True


@dataclass(slots=True)
class StaffAssignment:
    """Binds a person to a store in a picker or driver role.

    ``status`` is kept as the raw stored value; rows that never logged a
    status carry ``None``. Use :func:`effective_status` to read it.
    """

    assignment_id: str
    user_id: str
    store_id: str
    role: StaffRole
    status: Optional[str] = None
    last_status_change: Optional[datetime] = None


@dataclass(slots=True)
class OnlineStaffSnapshot:
    """Online pickers and drivers of one store at the instant of the read."""

    store_id: str
    pickers: list[StaffAssignment] = field(default_factory=list)
    drivers: list[StaffAssignment] = field(default_factory=list)

    @property
    def picker_count(self) -> int:
        return len(self.pickers)

    @property
    def driver_count(self) -> int:
        return len(self.drivers)

    @property
    def has_online_picker(self) -> bool:
        return bool(self.pickers)

    @property
    def has_online_driver(self) -> bool:
        return bool(self.drivers)


@dataclass(slots=True, frozen=True)
class StoreAvailability:
    """Per-request availability view of a store. Never persisted."""

    store: Store
    distance_km: float
    has_online_picker: bool
    has_online_driver: bool
    is_available: bool
