# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models: pure data structures, NO FastAPI dependency.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class ServiceTime(BaseModel):
    """A service definition: one-off on ``date`` or weekly on its weekday."""
    id: str
    date: date
    time: str = Field(..., description="Time of day, HH:MM (24h)")
    name: str
    is_recurring: bool = False
    positions: int = Field(default=2, ge=1)
    created_at: Optional[str] = None


class ServiceTimeDraft(BaseModel):
    """A service definition that has not been stored yet."""
    date: date
    time: str
    name: str
    is_recurring: bool = False
    positions: int = Field(default=2, ge=1)


class Minister(BaseModel):
    """A roster member who can hold slots."""
    id: str
    name: str
    email: Optional[str] = None
    created_at: Optional[str] = None


class MinisterSlot(BaseModel):
    """One assignable position of one service occurrence."""
    id: str
    service_id: str
    date: date
    position: int = Field(..., ge=1)
    minister_id: Optional[str] = None
    minister_name: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.minister_id is None


class CurrentUser(BaseModel):
    """Identity of the caller, supplied by the upstream gateway."""
    id: str = Field(..., min_length=1)
    name: str = ""
    role: str = Field(default="minister", pattern="^(admin|minister)$")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class ServiceDay(BaseModel):
    """A service occurring on a given day together with its slots."""
    service: ServiceTime
    slots: list[MinisterSlot]


class DayView(BaseModel):
    date: date
    is_today: bool
    is_current_month: bool
    services: list[ServiceDay] = Field(default_factory=list)
