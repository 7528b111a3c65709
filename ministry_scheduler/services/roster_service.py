# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: minister roster management.
"""

from typing import Optional

from ministry_scheduler.core.errors import NotFoundError, ValidationError
from ministry_scheduler.core.logging import get_logger
from ministry_scheduler.metrics.prometheus import MINISTERS_ACTIVE
from ministry_scheduler.models.domain import Minister
from ministry_scheduler.repositories.minister_repository import MinisterRepository
from ministry_scheduler.services.calendar_events import CalendarEvents

logger = get_logger(__name__)


class RosterService:
    """Business logic for adding and removing ministers."""

    def __init__(self, minister_repo: MinisterRepository, events: CalendarEvents) -> None:
        self._ministers = minister_repo
        self._events = events

    def list_ministers(self) -> list[Minister]:
        return self._ministers.list_ministers()

    def get_minister(self, minister_id: str) -> Minister:
        minister = self._ministers.get_minister(minister_id)
        if minister is None:
            raise NotFoundError(f"Minister {minister_id} not found")
        return minister

    def add_minister(
        self,
        name: str,
        email: Optional[str] = None,
        minister_id: Optional[str] = None,
    ) -> Minister:
        """Add a minister. Raises ValidationError / ConflictError."""
        if name is None or not name.strip():
            raise ValidationError("Please enter a name for the new minister")
        minister = self._ministers.insert_minister(
            name.strip(), email=email, minister_id=minister_id
        )
        MINISTERS_ACTIVE.set(self._ministers.count())
        logger.info("Minister added: id=%s", minister.id)
        self._events.publish("minister_added")
        return minister

    def remove_minister(self, minister_id: str) -> dict[str, str]:
        """Remove a minister; any slot they held becomes open."""
        if not self._ministers.delete_minister(minister_id):
            raise NotFoundError(f"Minister {minister_id} not found")
        MINISTERS_ACTIVE.set(self._ministers.count())
        logger.info("Minister removed: id=%s", minister_id)
        self._events.publish("minister_removed")
        return {"status": "deleted", "minister_id": minister_id}
