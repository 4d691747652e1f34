"""Online staff snapshot per store."""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from ...models.domain import OnlineStaffSnapshot, StaffAssignment, StaffRole, StaffStatus

AssignmentsProvider = Callable[[str], Iterable[StaffAssignment]]


def effective_status(raw_status: Optional[str]) -> StaffStatus:
    """Resolve the stored status of an assignment.

    Anything other than an explicit ``online`` (missing, blank, unknown values)
    resolves to OFFLINE so that an order is never routed to an uncovered store.
    """

    if raw_status is None:
        return StaffStatus.OFFLINE
    if str(raw_status).strip().lower() == StaffStatus.ONLINE.value:
        return StaffStatus.ONLINE
    return StaffStatus.OFFLINE


def online_staff_snapshot(store_id: str, assignments: Iterable[StaffAssignment]) -> OnlineStaffSnapshot:
    """Partition the online assignments of ``store_id`` into pickers and drivers."""

    snapshot = OnlineStaffSnapshot(store_id=store_id)
    for assignment in assignments:
        if assignment.store_id != store_id:
            continue
        if effective_status(assignment.status) is not StaffStatus.ONLINE:
            continue
        if assignment.role is StaffRole.PICKER:
            snapshot.pickers.append(assignment)
        elif assignment.role is StaffRole.DRIVER:
            snapshot.drivers.append(assignment)
    snapshot.pickers.sort(key=lambda item: item.assignment_id)
    snapshot.drivers.sort(key=lambda item: item.assignment_id)
    return snapshot


class StaffingSnapshotResolver:
    """Callable ``store_id -> OnlineStaffSnapshot`` over an assignments provider.

    The provider is read on every call; nothing is cached between calls.
    """

    def __init__(self, assignments_provider: AssignmentsProvider) -> None:
        self._assignments_provider = assignments_provider

    def __call__(self, store_id: str) -> OnlineStaffSnapshot:
        return online_staff_snapshot(store_id, self._assignments_provider(store_id))
