# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: service-time definitions.
Pure data access: validation and recurrence rules live in the services.
"""
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from ministry_scheduler.core.dates import as_calendar_date
from ministry_scheduler.core.logging import get_logger
from ministry_scheduler.models.domain import ServiceTime, ServiceTimeDraft
from ministry_scheduler.repositories.base import storage_guard, utc_now_iso

logger = get_logger(__name__)

SERVICE_TIME_COLS = "id, date, time, name, is_recurring, positions, created_at"


def _row_to_service_time(row: Dict[str, Any]) -> ServiceTime:
    return ServiceTime(
        id=str(row["id"]),
        date=as_calendar_date(row["date"]),
        time=row["time"],
        name=row["name"],
        is_recurring=bool(row["is_recurring"]),
        positions=int(row["positions"]),
        created_at=row["created_at"],
    )


class ServiceTimeRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ───────────────────────────────────────────────────────────

    def list_service_times(self) -> List[ServiceTime]:
        with storage_guard("list_service_times"):
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"SELECT {SERVICE_TIME_COLS} FROM service_times ORDER BY date, time, name")
                ).mappings().all()
        return [_row_to_service_time(r) for r in rows]

    def get_service_time(self, service_id: str) -> Optional[ServiceTime]:
        with storage_guard("get_service_time"):
            with self._engine.connect() as conn:
                row = conn.execute(
                    text(f"SELECT {SERVICE_TIME_COLS} FROM service_times WHERE id = :id"),
                    {"id": service_id},
                ).mappings().first()
        return _row_to_service_time(row) if row else None

    def count(self) -> int:
        with storage_guard("count_service_times"):
            with self._engine.connect() as conn:
                return conn.execute(text("SELECT COUNT(*) FROM service_times")).scalar() or 0

    # ── Write ──────────────────────────────────────────────────────────

    def insert_service_time(self, draft: ServiceTimeDraft) -> ServiceTime:
        record = ServiceTime(id=str(uuid.uuid4()), created_at=utc_now_iso(), **draft.model_dump())
        with storage_guard("insert_service_time"):
            with self._engine.begin() as conn:
                conn.execute(
                    text("""
                        INSERT INTO service_times
                            (id, date, time, name, is_recurring, positions, created_at)
                        VALUES
                            (:id, :date, :time, :name, :is_recurring, :positions, :created_at)
                    """),
                    {
                        "id": record.id,
                        "date": record.date.isoformat(),
                        "time": record.time,
                        "name": record.name,
                        "is_recurring": record.is_recurring,
                        "positions": record.positions,
                        "created_at": record.created_at,
                    },
                )
        return record

    def delete_service_time(self, service_id: str) -> bool:
        """Delete a definition together with every slot it generated."""
        with storage_guard("delete_service_time"):
            with self._engine.begin() as conn:
                conn.execute(
                    text("DELETE FROM minister_slots WHERE service_id = :id"),
                    {"id": service_id},
                )
                deleted = conn.execute(
                    text("DELETE FROM service_times WHERE id = :id"),
                    {"id": service_id},
                ).rowcount
        return deleted > 0

    def delete_all_service_times(self) -> int:
        with storage_guard("delete_all_service_times"):
            with self._engine.begin() as conn:
                conn.execute(text("DELETE FROM minister_slots"))
                deleted = conn.execute(text("DELETE FROM service_times")).rowcount
        logger.info("Deleted all service times: %d rows", deleted)
        return deleted
