# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: service-time endpoints.
Thin HTTP layer: delegates ALL logic to ServiceTimeRegistry / WeekCopyService.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ministry_scheduler.core.config import settings
from ministry_scheduler.core.dates import week_dates, week_start
from ministry_scheduler.core.dependencies import (
    get_current_user,
    get_registry,
    get_week_copy_service,
    require_admin,
)
from ministry_scheduler.core.errors import NotFoundError
from ministry_scheduler.models.domain import CurrentUser, ServiceTime
from ministry_scheduler.schemas.calendar import (
    ServiceTimeCreateRequest,
    ServiceTimeResponse,
    WeekCopyRequest,
    WeekCopyResponse,
)
from ministry_scheduler.services.registry import ServiceTimeRegistry, describe
from ministry_scheduler.services.week_copy import WeekCopyService

router = APIRouter(prefix="/api/v1", tags=["Service Times"])


def _to_response(service: ServiceTime) -> ServiceTimeResponse:
    return ServiceTimeResponse(**service.model_dump(), description=describe(service))


@router.get("/service-times", response_model=list[ServiceTimeResponse])
def list_service_times(
    on: Optional[date] = Query(default=None, description="Only services occurring on this date"),
    registry: ServiceTimeRegistry = Depends(get_registry),
    _user: CurrentUser = Depends(get_current_user),
):
    """List every definition, or those occurring on a given date."""
    services = registry.occurring_on(on) if on else registry.list_all()
    return [_to_response(s) for s in services]


@router.post("/service-times", status_code=201, response_model=ServiceTimeResponse)
def create_service_time(
    payload: ServiceTimeCreateRequest,
    registry: ServiceTimeRegistry = Depends(get_registry),
    _admin: CurrentUser = Depends(require_admin),
):
    """Add a one-off or weekly recurring service."""
    created = registry.add(
        payload.date,
        payload.time,
        payload.name,
        payload.is_recurring,
        positions=payload.positions,
    )
    return _to_response(created)


@router.delete("/service-times/{service_id}")
def delete_service_time(
    service_id: str,
    registry: ServiceTimeRegistry = Depends(get_registry),
    _admin: CurrentUser = Depends(require_admin),
):
    """Delete a service and all of its slots."""
    if not registry.delete(service_id):
        raise NotFoundError(f"Service time {service_id} not found")
    return {"status": "deleted", "service_id": service_id}


@router.post("/service-times/copy-week", response_model=WeekCopyResponse)
def copy_week(
    payload: WeekCopyRequest,
    service: WeekCopyService = Depends(get_week_copy_service),
    _admin: CurrentUser = Depends(require_admin),
):
    """Copy one week's one-off services onto another (default: the next) week."""
    if payload.source_dates is not None and payload.target_dates is not None:
        created = service.copy_week(payload.source_dates, payload.target_dates)
    else:
        source = week_start(payload.source_week_start, settings.WEEK_STARTS_ON)
        if payload.target_week_start is None:
            created = service.copy_week_forward(source)
        else:
            target = week_start(payload.target_week_start, settings.WEEK_STARTS_ON)
            created = service.copy_week(week_dates(source), week_dates(target))
    return {"created": created, "created_count": len(created)}
