# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: materialized minister slots.
Minister names come from a live join with the roster, never from the slot row.
The two UNIQUE constraints on minister_slots are the final guards for
idempotent materialization and for the one-slot-per-service-per-day rule.
"""
import uuid
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from ministry_scheduler.core.dates import as_calendar_date
from ministry_scheduler.core.errors import ConflictError, NotFoundError
from ministry_scheduler.core.logging import get_logger
from ministry_scheduler.models.domain import MinisterSlot
from ministry_scheduler.repositories.base import storage_guard, utc_now_iso

logger = get_logger(__name__)

SLOT_SELECT = """
    SELECT s.id, s.service_id, s.date, s.position, s.minister_id, m.name AS minister_name
    FROM minister_slots s
    LEFT JOIN ministers m ON m.id = s.minister_id
"""
SLOT_ORDER = " ORDER BY s.date, s.service_id, s.position"


def _row_to_slot(row: Dict[str, Any]) -> MinisterSlot:
    return MinisterSlot(
        id=str(row["id"]),
        service_id=str(row["service_id"]),
        date=as_calendar_date(row["date"]),
        position=int(row["position"]),
        minister_id=row["minister_id"],
        minister_name=row["minister_name"],
    )


class SlotRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ───────────────────────────────────────────────────────────

    def list_minister_slots(self, start: Optional[date] = None,
                            end: Optional[date] = None) -> List[MinisterSlot]:
        """All slots, optionally limited to ``start <= date < end``."""
        conditions = []
        params: Dict[str, Any] = {}
        if start is not None:
            conditions.append("s.date >= :start")
            params["start"] = start.isoformat()
        if end is not None:
            conditions.append("s.date < :end")
            params["end"] = end.isoformat()
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        with storage_guard("list_minister_slots"):
            with self._engine.connect() as conn:
                rows = conn.execute(text(SLOT_SELECT + where + SLOT_ORDER), params).mappings().all()
        return [_row_to_slot(r) for r in rows]

    def list_for_occurrence(self, service_id: str, day: date) -> List[MinisterSlot]:
        """Every position of one service on one day."""
        with storage_guard("list_for_occurrence"):
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(SLOT_SELECT + " WHERE s.service_id = :sid AND s.date = :date" + SLOT_ORDER),
                    {"sid": service_id, "date": day.isoformat()},
                ).mappings().all()
        return [_row_to_slot(r) for r in rows]

    def get_slot(self, slot_id: str) -> Optional[MinisterSlot]:
        with storage_guard("get_slot"):
            with self._engine.connect() as conn:
                return self._get_slot(conn, slot_id)

    def count(self) -> int:
        with storage_guard("count_slots"):
            with self._engine.connect() as conn:
                return conn.execute(text("SELECT COUNT(*) FROM minister_slots")).scalar() or 0

    # ── Write ──────────────────────────────────────────────────────────

    def insert_minister_slot(self, service_id: str, day: date, position: int) -> MinisterSlot:
        """Create an open slot; a concurrent duplicate resolves to the stored row."""
        slot_id = str(uuid.uuid4())
        with storage_guard("insert_minister_slot"):
            try:
                with self._engine.begin() as conn:
                    conn.execute(
                        text("""
                            INSERT INTO minister_slots (id, service_id, date, position, minister_id, created_at)
                            VALUES (:id, :sid, :date, :position, NULL, :created_at)
                        """),
                        {"id": slot_id, "sid": service_id, "date": day.isoformat(),
                         "position": position, "created_at": utc_now_iso()},
                    )
            except IntegrityError:
                existing = self._find_position(service_id, day, position)
                if existing is None:
                    raise NotFoundError(f"Service time {service_id} no longer exists")
                logger.info(
                    "Slot already materialized: service=%s date=%s position=%d",
                    service_id, day.isoformat(), position,
                )
                return existing
        return MinisterSlot(id=slot_id, service_id=service_id, date=day, position=position)

    def update_minister_slot_assignment(self, slot_id: str, minister_id: Optional[str]) -> bool:
        """Set or clear the minister of a slot. False if the slot is gone."""
        with storage_guard("update_minister_slot_assignment"):
            try:
                with self._engine.begin() as conn:
                    updated = conn.execute(
                        text("UPDATE minister_slots SET minister_id = :mid WHERE id = :id"),
                        {"mid": minister_id, "id": slot_id},
                    ).rowcount
            except IntegrityError as exc:
                logger.warning("Assignment rejected by storage: slot=%s minister=%s", slot_id, minister_id)
                raise ConflictError(
                    "Minister is already assigned to another position of this service"
                ) from exc
        return updated > 0

    def assign_minister(self, slot_id: str, minister_id: str,
                        register_name: Optional[str] = None) -> None:
        """
        Put ``minister_id`` on the slot, first adding them to the roster when
        ``register_name`` is given. Both writes share one transaction, so a
        rejected assignment leaves no roster row behind.
        Raises NotFoundError if the slot is gone, ConflictError on double-booking.
        """
        with storage_guard("assign_minister"):
            try:
                with self._engine.begin() as conn:
                    if register_name is not None:
                        exists = conn.execute(
                            text("SELECT 1 FROM ministers WHERE id = :id"), {"id": minister_id}
                        ).first()
                        if exists is None:
                            conn.execute(
                                text("""
                                    INSERT INTO ministers (id, name, email, created_at)
                                    VALUES (:id, :name, NULL, :created_at)
                                """),
                                {"id": minister_id, "name": register_name, "created_at": utc_now_iso()},
                            )
                    updated = conn.execute(
                        text("UPDATE minister_slots SET minister_id = :mid WHERE id = :id"),
                        {"mid": minister_id, "id": slot_id},
                    ).rowcount
                    if not updated:
                        raise NotFoundError(f"Slot {slot_id} no longer exists")
            except IntegrityError as exc:
                logger.warning("Assignment rejected by storage: slot=%s minister=%s", slot_id, minister_id)
                raise ConflictError(
                    "Minister is already assigned to another position of this service"
                ) from exc

    def delete_all_minister_slots(self) -> int:
        with storage_guard("delete_all_minister_slots"):
            with self._engine.begin() as conn:
                deleted = conn.execute(text("DELETE FROM minister_slots")).rowcount
        logger.info("Deleted all minister slots: %d rows", deleted)
        return deleted

    # ── Private ────────────────────────────────────────────────────────

    def _get_slot(self, conn: Connection, slot_id: str) -> Optional[MinisterSlot]:
        row = conn.execute(
            text(SLOT_SELECT + " WHERE s.id = :id"), {"id": slot_id}
        ).mappings().first()
        return _row_to_slot(row) if row else None

    def _find_position(self, service_id: str, day: date, position: int) -> Optional[MinisterSlot]:
        with storage_guard("find_slot_position"):
            with self._engine.connect() as conn:
                row = conn.execute(
                    text(SLOT_SELECT + " WHERE s.service_id = :sid AND s.date = :date AND s.position = :pos"),
                    {"sid": service_id, "date": day.isoformat(), "pos": position},
                ).mappings().first()
        return _row_to_slot(row) if row else None
