# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection: wire repositories and services.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException

from ministry_scheduler.core.database import create_db_engine
from ministry_scheduler.models.domain import CurrentUser
from ministry_scheduler.repositories import (
    MinisterRepository,
    SchemaMetaRepository,
    ServiceTimeRepository,
    SlotRepository,
)
from ministry_scheduler.services.assignment import AssignmentEngine
from ministry_scheduler.services.calendar_events import CalendarEvents
from ministry_scheduler.services.calendar_service import CalendarService
from ministry_scheduler.services.materializer import FallbackPolicy, SlotMaterializer
from ministry_scheduler.services.registry import ServiceTimeRegistry
from ministry_scheduler.services.roster_service import RosterService
from ministry_scheduler.services.schedule_view import ScheduleViewBuilder
from ministry_scheduler.services.week_copy import WeekCopyService

engine = create_db_engine()

# ── Singleton repository instances ──
_service_time_repo = ServiceTimeRepository(engine)
_slot_repo = SlotRepository(engine)
_minister_repo = MinisterRepository(engine)
_meta_repo = SchemaMetaRepository(engine)
_events = CalendarEvents()

# ── Service instances (with injected dependencies) ──
_registry = ServiceTimeRegistry(_service_time_repo, _slot_repo, _events)
_materializer = SlotMaterializer(_slot_repo, _registry, FallbackPolicy.from_settings())
_assignment_engine = AssignmentEngine(_slot_repo, _minister_repo, _events)
_view_builder = ScheduleViewBuilder(_materializer)
_week_copy_service = WeekCopyService(_service_time_repo, _events)
_roster_service = RosterService(_minister_repo, _events)
_calendar_service = CalendarService(
    registry=_registry,
    service_time_repo=_service_time_repo,
    slot_repo=_slot_repo,
    minister_repo=_minister_repo,
    view_builder=_view_builder,
    meta_repo=_meta_repo,
)


# ── FastAPI dependency functions ──
def get_registry() -> ServiceTimeRegistry:
    return _registry


def get_materializer() -> SlotMaterializer:
    return _materializer


def get_assignment_engine() -> AssignmentEngine:
    return _assignment_engine


def get_week_copy_service() -> WeekCopyService:
    return _week_copy_service


def get_roster_service() -> RosterService:
    return _roster_service


def get_calendar_service() -> CalendarService:
    return _calendar_service


def get_calendar_events() -> CalendarEvents:
    return _events


def get_slot_repo() -> SlotRepository:
    return _slot_repo


# ── Caller identity (set by the upstream gateway) ──
def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_name: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> CurrentUser:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    role = (x_user_role or "minister").lower()
    if role not in ("admin", "minister"):
        raise HTTPException(status_code=403, detail=f"Unknown role '{x_user_role}'")
    return CurrentUser(id=x_user_id, name=x_user_name or "", role=role)


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Administrator role required")
    return user
