# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas: API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ministry_scheduler.models.domain import DayView, ServiceTime


# ── Service-Time Schemas ──

class ServiceTimeCreateRequest(BaseModel):
    date: date
    time: str = Field(..., description="Time of day, HH:MM (24h)")
    name: str = Field(..., min_length=1, max_length=255)
    is_recurring: bool = False
    positions: Optional[int] = Field(
        default=None, ge=1, le=20, description="Minister positions (default 2)"
    )


class ServiceTimeResponse(ServiceTime):
    description: str


class WeekCopyRequest(BaseModel):
    """Either two week starts, or two explicit 7-date lists."""
    source_week_start: Optional[date] = None
    target_week_start: Optional[date] = None
    source_dates: Optional[list[date]] = Field(default=None, min_length=7, max_length=7)
    target_dates: Optional[list[date]] = Field(default=None, min_length=7, max_length=7)

    @model_validator(mode="after")
    def _one_form(self):
        if (self.source_dates is None) != (self.target_dates is None):
            raise ValueError("source_dates and target_dates must be given together")
        explicit = self.source_dates is not None
        if explicit and (self.source_week_start or self.target_week_start):
            raise ValueError("Use either week starts or explicit date lists, not both")
        if not explicit and self.source_week_start is None:
            raise ValueError("Provide source_week_start or source_dates and target_dates")
        return self


class WeekCopyResponse(BaseModel):
    created: list[ServiceTime]
    created_count: int


# ── Slot Schemas ──

class AssignRequest(BaseModel):
    """Admins may name any minister; ministers default to themselves."""
    minister_id: Optional[str] = Field(default=None, min_length=1)


# ── Calendar Schemas ──

class CalendarResponse(BaseModel):
    start: date
    days: int
    today: date
    weeks: list[list[DayView]]


# ── Roster Schemas ──

class MinisterCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    id: Optional[str] = Field(default=None, min_length=1, max_length=64)


# ── Admin Schemas ──

class ResetRequest(BaseModel):
    slots: bool = True
    service_times: bool = False


class ErrorResponse(BaseModel):
    error: str
    detail: str
    request_id: Optional[str] = None
