# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: calendar facade: loads definitions and slots from storage and
hands them to the view builder. Also seeds demo data on an empty database.
"""

from datetime import date, timedelta
from typing import Optional

from ministry_scheduler.core.config import settings
from ministry_scheduler.core.dates import DateLike, as_calendar_date
from ministry_scheduler.core.errors import ValidationError
from ministry_scheduler.core.logging import get_logger
from ministry_scheduler.metrics.prometheus import MINISTERS_ACTIVE, SERVICE_TIMES_ACTIVE
from ministry_scheduler.models.domain import DayView
from ministry_scheduler.repositories.meta_repository import SEEDED_MARKER, SchemaMetaRepository
from ministry_scheduler.repositories.minister_repository import MinisterRepository
from ministry_scheduler.repositories.service_time_repository import ServiceTimeRepository
from ministry_scheduler.repositories.slot_repository import SlotRepository
from ministry_scheduler.services.registry import ServiceTimeRegistry
from ministry_scheduler.services.schedule_view import ScheduleViewBuilder, filter_for_minister

logger = get_logger(__name__)

DEFAULT_SERVICES = [
    {"time": "09:00", "name": "Santa Messa Mattutina"},
    {"time": "18:00", "name": "Santa Messa Vespertina"},
]

DEFAULT_MINISTERS = [
    "Giovanni Bianchi",
    "Maria Rossi",
    "Roberto Verdi",
    "Patrizia Neri",
    "Michele Russo",
]


class CalendarService:
    """Read-side entry point for calendar views."""

    def __init__(
        self,
        registry: ServiceTimeRegistry,
        service_time_repo: ServiceTimeRepository,
        slot_repo: SlotRepository,
        minister_repo: MinisterRepository,
        view_builder: ScheduleViewBuilder,
        meta_repo: SchemaMetaRepository,
    ) -> None:
        self._registry = registry
        self._service_times = service_time_repo
        self._slots = slot_repo
        self._ministers = minister_repo
        self._builder = view_builder
        self._meta = meta_repo

    def get_calendar(
        self,
        start: DateLike,
        number_of_days: int,
        today: DateLike,
        minister_id: Optional[str] = None,
        hide_empty: bool = False,
    ) -> list[DayView]:
        """Day views for the range; restricted to ``minister_id``'s slots if given."""
        if number_of_days < 1 or number_of_days > settings.MAX_CALENDAR_DAYS:
            raise ValidationError(
                f"days must be between 1 and {settings.MAX_CALENDAR_DAYS}"
            )
        start = as_calendar_date(start)
        end = start + timedelta(days=number_of_days)
        definitions = self._registry.list_all()
        slots = self._slots.list_minister_slots(start, end)
        days = self._builder.build_range(start, number_of_days, definitions, slots, today)
        if minister_id is not None:
            days = filter_for_minister(days, minister_id, hide_empty=hide_empty)
        return days

    # ── Seed ──

    def seed_defaults(self, today: Optional[date] = None) -> bool:
        """
        Create demo services and ministers on a fresh database. Runs at most
        once per database: data an admin deleted later is not brought back.
        Returns True when seeding ran.
        """
        if self._meta.get_marker(SEEDED_MARKER) is not None:
            logger.info("Default data already seeded once; skipping")
            return False
        today = today or date.today()
        if self._service_times.count() == 0:
            next_sunday = today + timedelta(days=(6 - today.weekday()) % 7)
            for service in DEFAULT_SERVICES:
                self._registry.add(
                    next_sunday, service["time"], service["name"],
                    is_recurring=True, source="seed",
                )
            logger.info("Seeded %d default service times", len(DEFAULT_SERVICES))
        if self._ministers.count() == 0:
            for name in DEFAULT_MINISTERS:
                self._ministers.insert_minister(name)
            logger.info("Seeded %d default ministers", len(DEFAULT_MINISTERS))
        SERVICE_TIMES_ACTIVE.set(self._service_times.count())
        MINISTERS_ACTIVE.set(self._ministers.count())
        self._meta.set_marker(SEEDED_MARKER, today.isoformat())
        return True
