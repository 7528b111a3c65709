# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: calendar view and slot sign-up / release endpoints.
Thin HTTP layer: authorization policy here, data invariants in the services.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ministry_scheduler.core.config import settings
from ministry_scheduler.core.dependencies import (
    get_assignment_engine,
    get_calendar_service,
    get_current_user,
    get_slot_repo,
)
from ministry_scheduler.core.errors import NotFoundError
from ministry_scheduler.core.permissions import assign_denial_reason, can_release
from ministry_scheduler.models.domain import CurrentUser, MinisterSlot
from ministry_scheduler.repositories.slot_repository import SlotRepository
from ministry_scheduler.schemas.calendar import AssignRequest, CalendarResponse
from ministry_scheduler.services.assignment import AssignmentEngine
from ministry_scheduler.services.calendar_service import CalendarService
from ministry_scheduler.services.schedule_view import group_into_weeks

router = APIRouter(prefix="/api/v1", tags=["Calendar"])


def _load_slot(slot_repo: SlotRepository, slot_id: str) -> MinisterSlot:
    slot = slot_repo.get_slot(slot_id)
    if slot is None:
        raise NotFoundError(f"Slot {slot_id} not found")
    return slot


@router.get("/calendar", response_model=CalendarResponse)
def get_calendar(
    start: Optional[date] = Query(default=None, description="First day; defaults to today"),
    days: Optional[int] = Query(default=None, ge=1, description="Number of days"),
    today: Optional[date] = Query(default=None, description="Override the reference 'today'"),
    mine: bool = Query(default=False, description="Only the caller's own slots"),
    hide_empty: bool = Query(default=False, description="Drop services with no slots left"),
    service: CalendarService = Depends(get_calendar_service),
    user: CurrentUser = Depends(get_current_user),
):
    """Day-by-day schedule grouped into weeks, materializing slots as needed."""
    today = today or date.today()
    start = start or today
    number_of_days = days or settings.DEFAULT_CALENDAR_DAYS
    day_views = service.get_calendar(
        start,
        number_of_days,
        today,
        minister_id=user.id if mine else None,
        hide_empty=hide_empty,
    )
    return {
        "start": start,
        "days": number_of_days,
        "today": today,
        "weeks": group_into_weeks(day_views),
    }


@router.post("/slots/{slot_id}/assign", response_model=MinisterSlot)
def assign_slot(
    slot_id: str,
    payload: Optional[AssignRequest] = None,
    engine: AssignmentEngine = Depends(get_assignment_engine),
    slot_repo: SlotRepository = Depends(get_slot_repo),
    user: CurrentUser = Depends(get_current_user),
):
    """Sign a minister up for a slot (the caller, unless an admin names someone)."""
    minister_id = (payload.minister_id if payload else None) or user.id
    slot = _load_slot(slot_repo, slot_id)
    reason = assign_denial_reason(user, slot, minister_id)
    if reason:
        raise HTTPException(status_code=403, detail=reason)
    minister_name = user.name if minister_id == user.id else None
    return engine.assign(slot_id, minister_id, minister_name)


@router.post("/slots/{slot_id}/release", response_model=MinisterSlot)
def release_slot(
    slot_id: str,
    engine: AssignmentEngine = Depends(get_assignment_engine),
    slot_repo: SlotRepository = Depends(get_slot_repo),
    user: CurrentUser = Depends(get_current_user),
):
    """Remove the minister from a slot (own slot, or any slot for admins)."""
    slot = _load_slot(slot_repo, slot_id)
    if not slot.is_open and not can_release(user, slot):
        raise HTTPException(status_code=403, detail="You can only cancel your own service")
    return engine.release(slot_id)
