# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: week copy: duplicate one week's one-off services onto another week.
Recurring definitions are never copied; they already apply to every week.
Slot assignments are not copied; the new week materializes lazily.
"""

from datetime import date
from typing import Iterable, Sequence

from ministry_scheduler.core.dates import DateLike, as_calendar_date, next_week, week_dates
from ministry_scheduler.core.errors import ValidationError
from ministry_scheduler.core.logging import get_logger
from ministry_scheduler.metrics.prometheus import SERVICE_TIMES_ACTIVE, SERVICE_TIMES_CREATED, WEEK_COPIES
from ministry_scheduler.models.domain import ServiceTime, ServiceTimeDraft
from ministry_scheduler.repositories.service_time_repository import ServiceTimeRepository
from ministry_scheduler.services.calendar_events import CalendarEvents
from ministry_scheduler.services.registry import occurring_on

logger = get_logger(__name__)


def _as_week(dates: Sequence[DateLike], label: str) -> list[date]:
    if len(dates) != 7:
        raise ValidationError(f"{label} week must have exactly 7 dates, got {len(dates)}")
    return [as_calendar_date(d) for d in dates]


def plan_week_copy(
    source_dates: Sequence[DateLike],
    target_dates: Sequence[DateLike],
    definitions: Iterable[ServiceTime],
) -> list[ServiceTimeDraft]:
    """
    Drafts for the one-off services of the source week that the target week
    lacks. A target already holding the same (date, time, name), stored or
    planned earlier in this call, is skipped. Pure.
    """
    source = _as_week(source_dates, "Source")
    target = _as_week(target_dates, "Target")
    definitions = list(definitions)

    present = {(d.date, d.time, d.name) for d in definitions}
    drafts: list[ServiceTimeDraft] = []
    for source_day, target_day in zip(source, target):
        for service in occurring_on(definitions, source_day):
            if service.is_recurring:
                continue
            key = (target_day, service.time, service.name)
            if key in present:
                continue
            present.add(key)
            drafts.append(
                ServiceTimeDraft(
                    date=target_day,
                    time=service.time,
                    name=service.name,
                    is_recurring=False,
                    positions=service.positions,
                )
            )
    return drafts


class WeekCopyService:
    """Persists week copies planned by plan_week_copy."""

    def __init__(self, service_time_repo: ServiceTimeRepository, events: CalendarEvents) -> None:
        self._service_times = service_time_repo
        self._events = events

    def copy_week(
        self,
        source_dates: Sequence[DateLike],
        target_dates: Sequence[DateLike],
    ) -> list[ServiceTime]:
        """
        Copy and return the newly created definitions. Safe to re-run after a
        partial failure: rows already written are skipped the next time.
        """
        definitions = self._service_times.list_service_times()
        drafts = plan_week_copy(source_dates, target_dates, definitions)
        created = [self._service_times.insert_service_time(draft) for draft in drafts]

        WEEK_COPIES.inc()
        if created:
            SERVICE_TIMES_CREATED.labels(source="week_copy").inc(len(created))
            SERVICE_TIMES_ACTIVE.set(self._service_times.count())
            self._events.publish("week_copied")
        logger.info(
            "Week copied: %s -> %s, created=%d",
            as_calendar_date(source_dates[0]).isoformat(),
            as_calendar_date(target_dates[0]).isoformat(),
            len(created),
        )
        return created

    def copy_week_forward(self, source_week_start: DateLike) -> list[ServiceTime]:
        """Copy the week starting at ``source_week_start`` onto the following week."""
        return self.copy_week(
            week_dates(source_week_start),
            week_dates(next_week(source_week_start)),
        )
