"""Staff online/offline toggling."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...data import roster_repository
from ...data.roster_repository import RosterUnavailableError
from ...models.domain import StaffStatus
from ...schemas.stores import StaffAssignmentModel, StaffStatusRequest, StaffStatusResponse
from .stores import roster_unavailable

router = APIRouter(prefix="/staff", tags=["staff"])


@router.post("/toggle-status", response_model=StaffStatusResponse, status_code=status.HTTP_200_OK)
def toggle_staff_status(payload: StaffStatusRequest) -> StaffStatusResponse:
    try:
        if not roster_repository.get_staff_by_user(payload.user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staff record not found")
        updated = roster_repository.update_staff_status(payload.user_id, StaffStatus(payload.status))
    except RosterUnavailableError as exc:
        raise roster_unavailable(exc) from exc
    return StaffStatusResponse(
        user_id=payload.user_id,
        status=payload.status,
        assignments=[StaffAssignmentModel.from_domain(item) for item in updated],
    )
