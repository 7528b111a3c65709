# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: roster and admin maintenance endpoints.
Thin HTTP layer: delegates ALL logic to RosterService / ServiceTimeRegistry.
"""

from fastapi import APIRouter, Depends

from ministry_scheduler.core.dependencies import (
    get_current_user,
    get_registry,
    get_roster_service,
    require_admin,
)
from ministry_scheduler.models.domain import CurrentUser, Minister
from ministry_scheduler.schemas.calendar import MinisterCreateRequest, ResetRequest
from ministry_scheduler.services.registry import ServiceTimeRegistry
from ministry_scheduler.services.roster_service import RosterService

router = APIRouter(prefix="/api/v1", tags=["Ministers"])


@router.get("/ministers", response_model=list[Minister])
def list_ministers(
    service: RosterService = Depends(get_roster_service),
    _user: CurrentUser = Depends(get_current_user),
):
    """List the minister roster."""
    return service.list_ministers()


@router.post("/ministers", status_code=201, response_model=Minister)
def add_minister(
    payload: MinisterCreateRequest,
    service: RosterService = Depends(get_roster_service),
    _admin: CurrentUser = Depends(require_admin),
):
    """Add a minister to the roster."""
    return service.add_minister(payload.name, email=payload.email, minister_id=payload.id)


@router.delete("/ministers/{minister_id}")
def remove_minister(
    minister_id: str,
    service: RosterService = Depends(get_roster_service),
    _admin: CurrentUser = Depends(require_admin),
):
    """Remove a minister; their slots become open."""
    return service.remove_minister(minister_id)


@router.post("/admin/reset", tags=["Admin"])
def reset_calendar(
    payload: ResetRequest,
    registry: ServiceTimeRegistry = Depends(get_registry),
    _admin: CurrentUser = Depends(require_admin),
):
    """Bulk delete of slots and, optionally, every service time."""
    return registry.reset(slots=payload.slots, service_times=payload.service_times)
