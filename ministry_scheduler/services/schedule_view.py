# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: schedule view builder.
Read-side assembly of day-by-day, service-by-service calendar structures.
"""

from datetime import date, timedelta
from typing import Iterable

from ministry_scheduler.core.dates import DateLike, as_calendar_date
from ministry_scheduler.models.domain import DayView, MinisterSlot, ServiceDay, ServiceTime
from ministry_scheduler.services.materializer import SlotMaterializer


def _service_sort_key(service: ServiceTime) -> tuple[str, str]:
    return service.time, service.name


def assemble_day(
    day: date,
    services: Iterable[ServiceTime],
    slots: Iterable[MinisterSlot],
    today: date,
) -> DayView:
    """Pair each service with its slots of ``day``. Pure."""
    slots = list(slots)
    service_days = [
        ServiceDay(
            service=service,
            slots=sorted(
                (s for s in slots if s.service_id == service.id and s.date == day),
                key=lambda s: s.position,
            ),
        )
        for service in sorted(services, key=_service_sort_key)
    ]
    return DayView(
        date=day,
        is_today=day == today,
        is_current_month=(day.year, day.month) == (today.year, today.month),
        services=service_days,
    )


class ScheduleViewBuilder:
    """Builds DayViews, materializing missing slots on the way."""

    def __init__(self, materializer: SlotMaterializer) -> None:
        self._materializer = materializer

    def build_range(
        self,
        start: DateLike,
        number_of_days: int,
        definitions: Iterable[ServiceTime],
        slots: Iterable[MinisterSlot],
        today: DateLike,
    ) -> list[DayView]:
        """One DayView per day of ``[start, start + number_of_days)``."""
        start = as_calendar_date(start)
        today = as_calendar_date(today)
        definitions = list(definitions)
        slots = list(slots)
        days: list[DayView] = []
        for offset in range(number_of_days):
            day = start + timedelta(days=offset)
            services, day_slots = self._materializer.materialize_day(day, definitions, slots)
            known = {d.id for d in definitions}
            definitions.extend(s for s in services if s.id not in known)
            days.append(assemble_day(day, services, day_slots, today))
        return days


def group_into_weeks(days: list[DayView]) -> list[list[DayView]]:
    """Chunks of 7 starting at the first day; callers align the start."""
    return [days[i:i + 7] for i in range(0, len(days), 7)]


def filter_for_minister(
    days: Iterable[DayView],
    minister_id: str,
    hide_empty: bool = False,
) -> list[DayView]:
    """
    "My schedule" projection: keep only slots held by ``minister_id``.
    With ``hide_empty`` services left without slots are dropped too.
    """
    result = []
    for day in days:
        services = []
        for service_day in day.services:
            mine = [s for s in service_day.slots if s.minister_id == minister_id]
            if mine or not hide_empty:
                services.append(ServiceDay(service=service_day.service, slots=mine))
        result.append(day.model_copy(update={"services": services}))
    return result
