# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: service-time registry.
Owns the recurring and one-off definitions and the rule that decides which
of them occur on a given date.
"""

from typing import Iterable, Optional

from ministry_scheduler.core.config import settings
from ministry_scheduler.core.dates import DateLike, WEEKDAY_NAMES, as_calendar_date, normalize_time
from ministry_scheduler.core.errors import ValidationError
from ministry_scheduler.core.logging import get_logger
from ministry_scheduler.metrics.prometheus import (
    SERVICE_TIMES_ACTIVE,
    SERVICE_TIMES_CREATED,
    SERVICE_TIMES_DELETED,
)
from ministry_scheduler.models.domain import ServiceTime, ServiceTimeDraft
from ministry_scheduler.repositories.service_time_repository import ServiceTimeRepository
from ministry_scheduler.repositories.slot_repository import SlotRepository
from ministry_scheduler.services.calendar_events import CalendarEvents

logger = get_logger(__name__)


def occurring_on(definitions: Iterable[ServiceTime], day: DateLike) -> list[ServiceTime]:
    """
    Definitions that take place on ``day``: same calendar date, or recurring
    with the same weekday. Pure function: no I/O.
    """
    day = as_calendar_date(day)
    weekday = day.weekday()
    return [
        d for d in definitions
        if d.date == day or (d.is_recurring and d.date.weekday() == weekday)
    ]


def describe(definition: ServiceTime) -> str:
    """Human label, e.g. ``Morning Mass - 09:00 - Sunday``."""
    weekday = WEEKDAY_NAMES[definition.date.weekday()].capitalize()
    return f"{definition.name} - {definition.time} - {weekday}"


def build_draft(
    day: DateLike,
    time: str,
    name: str,
    is_recurring: bool,
    positions: Optional[int] = None,
) -> ServiceTimeDraft:
    """Validate raw input into a draft. Raises ValidationError."""
    normalized_time = normalize_time(time)
    if name is None or not name.strip():
        raise ValidationError("Service name is required")
    positions = settings.DEFAULT_POSITIONS if positions is None else positions
    if positions < 1:
        raise ValidationError("A service needs at least one minister position")
    return ServiceTimeDraft(
        date=as_calendar_date(day),
        time=normalized_time,
        name=name.strip(),
        is_recurring=bool(is_recurring),
        positions=positions,
    )


class ServiceTimeRegistry:
    """Business logic for managing service-time definitions."""

    def __init__(
        self,
        service_time_repo: ServiceTimeRepository,
        slot_repo: SlotRepository,
        events: CalendarEvents,
    ) -> None:
        self._service_times = service_time_repo
        self._slots = slot_repo
        self._events = events

    # ── Queries ──

    def list_all(self) -> list[ServiceTime]:
        return self._service_times.list_service_times()

    def occurring_on(self, day: DateLike) -> list[ServiceTime]:
        return occurring_on(self.list_all(), day)

    # ── Commands ──

    def add(
        self,
        day: DateLike,
        time: str,
        name: str,
        is_recurring: bool,
        positions: Optional[int] = None,
        source: str = "admin",
    ) -> ServiceTime:
        """Create a definition. Raises ValidationError on bad input."""
        draft = build_draft(day, time, name, is_recurring, positions)
        created = self._service_times.insert_service_time(draft)

        SERVICE_TIMES_CREATED.labels(source=source).inc()
        SERVICE_TIMES_ACTIVE.set(self._service_times.count())
        logger.info(
            "Service time created: id=%s, %s, date=%s, recurring=%s",
            created.id, describe(created), created.date.isoformat(), created.is_recurring,
        )
        self._events.publish("service_time_added")
        return created

    def delete(self, service_id: str) -> bool:
        """Delete a definition and its slots. False when it does not exist."""
        deleted = self._service_times.delete_service_time(service_id)
        if not deleted:
            logger.info("Service time not found for deletion: id=%s", service_id)
            return False

        SERVICE_TIMES_DELETED.inc()
        SERVICE_TIMES_ACTIVE.set(self._service_times.count())
        logger.info("Service time deleted: id=%s", service_id)
        self._events.publish("service_time_deleted")
        return True

    def reset(self, slots: bool = True, service_times: bool = True) -> dict[str, int]:
        """Bulk admin reset. Deleting definitions always deletes their slots."""
        result = {"slots_deleted": 0, "service_times_deleted": 0}
        if slots or service_times:
            result["slots_deleted"] = self._slots.delete_all_minister_slots()
        if service_times:
            result["service_times_deleted"] = self._service_times.delete_all_service_times()
        SERVICE_TIMES_ACTIVE.set(self._service_times.count())
        logger.info("Calendar reset: %s", result)
        self._events.publish("reset")
        return result
