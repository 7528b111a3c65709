# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: assignment engine: claims and releases of minister slots.

Per-slot state machine:
    Open ─assign─► Assigned(minister) ─release─► Open
    Assigned(a) ─assign(b)─► Assigned(b)   (allowed here; callers restrict it)

A minister may hold at most one position of a service on a given day.
The in-memory scan is the fast path; the UNIQUE(service_id, date,
minister_id) constraint in storage is the final arbiter under concurrency.
Who may call what is decided by core.permissions, not here.
"""

from typing import Iterable, Optional

from ministry_scheduler.core.errors import ConflictError, NotFoundError
from ministry_scheduler.core.logging import get_logger
from ministry_scheduler.metrics.prometheus import ASSIGNMENTS_TOTAL, RELEASES_TOTAL
from ministry_scheduler.models.domain import MinisterSlot
from ministry_scheduler.repositories.minister_repository import MinisterRepository
from ministry_scheduler.repositories.slot_repository import SlotRepository
from ministry_scheduler.services.calendar_events import CalendarEvents

logger = get_logger(__name__)


def find_conflicting_slot(
    slots: Iterable[MinisterSlot],
    target: MinisterSlot,
    minister_id: str,
) -> Optional[MinisterSlot]:
    """Another slot of the target's (service, date) held by ``minister_id``."""
    for slot in slots:
        if (
            slot.id != target.id
            and slot.service_id == target.service_id
            and slot.date == target.date
            and slot.minister_id == minister_id
        ):
            return slot
    return None


class AssignmentEngine:
    """Enforces the data invariants of slot assignment."""

    def __init__(
        self,
        slot_repo: SlotRepository,
        minister_repo: MinisterRepository,
        events: Optional[CalendarEvents] = None,
    ) -> None:
        self._slots = slot_repo
        self._ministers = minister_repo
        self._events = events

    def assign(
        self,
        slot_id: str,
        minister_id: str,
        minister_name: Optional[str] = None,
    ) -> MinisterSlot:
        """
        Put ``minister_id`` on the slot and return the stored result.
        A minister not yet on the roster is registered when ``minister_name``
        is given, in the same transaction as the assignment. Raises
        NotFoundError / ConflictError; nothing is written on failure.
        """
        slot = self._slots.get_slot(slot_id)
        if slot is None:
            ASSIGNMENTS_TOTAL.labels(outcome="not_found").inc()
            raise NotFoundError(f"Slot {slot_id} not found")

        if slot.minister_id == minister_id:
            ASSIGNMENTS_TOTAL.labels(outcome="unchanged").inc()
            return slot

        occurrence = self._slots.list_for_occurrence(slot.service_id, slot.date)
        conflict = find_conflicting_slot(occurrence, slot, minister_id)
        if conflict is not None:
            ASSIGNMENTS_TOTAL.labels(outcome="conflict").inc()
            logger.info(
                "Assignment rejected: minister=%s already holds position %d of service=%s on %s",
                minister_id, conflict.position, slot.service_id, slot.date.isoformat(),
            )
            raise ConflictError(
                "Minister is already assigned to another position of this service"
            )

        register_name = self._name_to_register(minister_id, minister_name)

        try:
            self._slots.assign_minister(slot_id, minister_id, register_name)
        except ConflictError:
            ASSIGNMENTS_TOTAL.labels(outcome="conflict").inc()
            raise
        except NotFoundError:
            ASSIGNMENTS_TOTAL.labels(outcome="not_found").inc()
            raise

        ASSIGNMENTS_TOTAL.labels(outcome="assigned").inc()
        if register_name is not None:
            logger.info("Minister registered on first sign-up: id=%s", minister_id)
        logger.info(
            "Slot assigned: slot=%s minister=%s previous=%s",
            slot_id, minister_id, slot.minister_id,
        )
        self._publish("slot_assigned")
        return self._reload(slot_id)

    def release(self, slot_id: str) -> MinisterSlot:
        """
        Clear the slot. Releasing an already open slot is a no-op success.
        Raises NotFoundError.
        """
        slot = self._slots.get_slot(slot_id)
        if slot is None:
            RELEASES_TOTAL.labels(outcome="not_found").inc()
            raise NotFoundError(f"Slot {slot_id} not found")
        if slot.is_open:
            RELEASES_TOTAL.labels(outcome="already_open").inc()
            return slot

        if not self._slots.update_minister_slot_assignment(slot_id, None):
            RELEASES_TOTAL.labels(outcome="not_found").inc()
            raise NotFoundError(f"Slot {slot_id} no longer exists")

        RELEASES_TOTAL.labels(outcome="released").inc()
        logger.info("Slot released: slot=%s minister=%s", slot_id, slot.minister_id)
        self._publish("slot_released")
        return self._reload(slot_id)

    # ── Internal ──

    def _name_to_register(self, minister_id: str, minister_name: Optional[str]) -> Optional[str]:
        """Roster name to add with the assignment, or None if already listed."""
        if self._ministers.get_minister(minister_id) is not None:
            return None
        if not minister_name or not minister_name.strip():
            ASSIGNMENTS_TOTAL.labels(outcome="not_found").inc()
            raise NotFoundError(f"Minister {minister_id} is not on the roster")
        return minister_name.strip()

    def _publish(self, reason: str) -> None:
        if self._events is not None:
            self._events.publish(reason)

    def _reload(self, slot_id: str) -> MinisterSlot:
        slot = self._slots.get_slot(slot_id)
        if slot is None:
            raise NotFoundError(f"Slot {slot_id} no longer exists")
        return slot
