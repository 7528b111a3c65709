# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: slot materialization.
Expands service-time definitions into concrete dated MinisterSlot rows,
idempotently: a (service, date, position) triple is created at most once.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from ministry_scheduler.core.config import settings
from ministry_scheduler.core.dates import DateLike, as_calendar_date, weekday_index
from ministry_scheduler.core.logging import get_logger
from ministry_scheduler.metrics.prometheus import FALLBACK_SERVICES_APPLIED, SLOTS_MATERIALIZED
from ministry_scheduler.models.domain import MinisterSlot, ServiceTime
from ministry_scheduler.repositories.slot_repository import SlotRepository
from ministry_scheduler.services.registry import ServiceTimeRegistry, occurring_on

logger = get_logger(__name__)


def plan_missing_slots(
    day: date,
    occurring: Iterable[ServiceTime],
    existing: Iterable[MinisterSlot],
) -> list[tuple[str, int]]:
    """(service_id, position) pairs with no slot yet on ``day``. Pure."""
    taken = {(s.service_id, s.position) for s in existing if s.date == day}
    return [
        (definition.id, position)
        for definition in occurring
        for position in range(1, definition.positions + 1)
        if (definition.id, position) not in taken
    ]


def parse_fallback_services(entries: Iterable[str]) -> list[tuple[str, str]]:
    """``"09:00|Morning Mass"`` entries to ``(time, name)`` pairs."""
    services = []
    for entry in entries:
        time, _, name = entry.partition("|")
        if time.strip() and name.strip():
            services.append((time.strip(), name.strip()))
    return services


class FallbackPolicy:
    """
    Legacy behaviour, off unless enabled: when no service occurs on one of
    ``weekdays``, register the built-in services as recurring definitions.
    """

    def __init__(
        self,
        enabled: bool = False,
        weekdays: Iterable[str] = ("sunday",),
        services: Iterable[tuple[str, str]] = (),
    ) -> None:
        self.enabled = enabled
        self.weekdays = {weekday_index(w) for w in weekdays}
        self.services = list(services)

    @classmethod
    def from_settings(cls) -> "FallbackPolicy":
        return cls(
            enabled=settings.FALLBACK_DEFAULT_SERVICES,
            weekdays=settings.FALLBACK_WEEKDAYS,
            services=parse_fallback_services(settings.FALLBACK_SERVICES),
        )

    def applies_to(self, day: date) -> bool:
        return self.enabled and bool(self.services) and day.weekday() in self.weekdays


class SlotMaterializer:
    """Creates missing slots on demand."""

    def __init__(
        self,
        slot_repo: SlotRepository,
        registry: Optional[ServiceTimeRegistry] = None,
        fallback: Optional[FallbackPolicy] = None,
    ) -> None:
        self._slots = slot_repo
        self._registry = registry
        self._fallback = fallback or FallbackPolicy()

    def ensure_slots_for(
        self,
        day: DateLike,
        definitions: Iterable[ServiceTime],
        existing_slots: Iterable[MinisterSlot],
    ) -> list[MinisterSlot]:
        """Every slot of ``day`` (existing + newly created)."""
        _, slots = self.materialize_day(day, definitions, existing_slots)
        return slots

    def materialize_day(
        self,
        day: DateLike,
        definitions: Iterable[ServiceTime],
        existing_slots: Iterable[MinisterSlot],
    ) -> tuple[list[ServiceTime], list[MinisterSlot]]:
        """
        Resolve the services of ``day`` and make sure all their slots exist.
        Returns (occurring services, slots of the day).
        Raises StorageError if an insert fails; slots created before the
        failure stay and are skipped on the next call.
        """
        day = as_calendar_date(day)
        occurring = occurring_on(definitions, day)
        if not occurring and self._fallback.applies_to(day):
            occurring = self._apply_fallback(day)

        existing = [s for s in existing_slots if s.date == day]
        known_ids = {s.id for s in existing}
        created: list[MinisterSlot] = []
        for service_id, position in plan_missing_slots(day, occurring, existing):
            slot = self._slots.insert_minister_slot(service_id, day, position)
            if slot.id not in known_ids:
                known_ids.add(slot.id)
                created.append(slot)

        if created:
            SLOTS_MATERIALIZED.inc(len(created))
            logger.info("Materialized %d slots for %s", len(created), day.isoformat())

        slots = sorted(existing + created, key=lambda s: (s.service_id, s.position))
        return occurring, slots

    def ensure_range(self, start: DateLike, number_of_days: int) -> dict[date, list[MinisterSlot]]:
        """Materialize every day of ``[start, start + number_of_days)`` from storage."""
        if self._registry is None:
            raise RuntimeError("ensure_range needs a registry")
        start = as_calendar_date(start)
        end = start + timedelta(days=number_of_days)
        definitions = self._registry.list_all()
        existing = self._slots.list_minister_slots(start, end)
        result: dict[date, list[MinisterSlot]] = {}
        for offset in range(number_of_days):
            day = start + timedelta(days=offset)
            occurring, slots = self.materialize_day(day, definitions, existing)
            definitions = _merge(definitions, occurring)
            result[day] = slots
        return result

    # ── Internal ──

    def _apply_fallback(self, day: date) -> list[ServiceTime]:
        if self._registry is None:
            logger.warning("Fallback services enabled but no registry wired; skipping %s", day)
            return []
        logger.warning(
            "No services configured for %s; registering %d default services",
            day.isoformat(), len(self._fallback.services),
        )
        FALLBACK_SERVICES_APPLIED.inc()
        return [
            self._registry.add(day, time, name, is_recurring=True, source="fallback")
            for time, name in self._fallback.services
        ]


def _merge(definitions: list[ServiceTime], extra: Iterable[ServiceTime]) -> list[ServiceTime]:
    """``definitions`` plus any of ``extra`` not already in it."""
    known = {d.id for d in definitions}
    return list(definitions) + [d for d in extra if d.id not in known]
