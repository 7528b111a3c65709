# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository: the minister roster."""
import uuid
from typing import List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from ministry_scheduler.core.errors import ConflictError
from ministry_scheduler.models.domain import Minister
from ministry_scheduler.repositories.base import storage_guard, utc_now_iso

MINISTER_COLS = "id, name, email, created_at"


class MinisterRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ───────────────────────────────────────────────────────────

    def list_ministers(self) -> List[Minister]:
        with storage_guard("list_ministers"):
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"SELECT {MINISTER_COLS} FROM ministers ORDER BY name")
                ).mappings().all()
        return [Minister(**r) for r in rows]

    def get_minister(self, minister_id: str) -> Optional[Minister]:
        with storage_guard("get_minister"):
            with self._engine.connect() as conn:
                row = conn.execute(
                    text(f"SELECT {MINISTER_COLS} FROM ministers WHERE id = :id"),
                    {"id": minister_id},
                ).mappings().first()
        return Minister(**row) if row else None

    def count(self) -> int:
        with storage_guard("count_ministers"):
            with self._engine.connect() as conn:
                return conn.execute(text("SELECT COUNT(*) FROM ministers")).scalar() or 0

    # ── Write ──────────────────────────────────────────────────────────

    def insert_minister(self, name: str, email: Optional[str] = None,
                        minister_id: Optional[str] = None) -> Minister:
        record = Minister(
            id=minister_id or str(uuid.uuid4()),
            name=name,
            email=email,
            created_at=utc_now_iso(),
        )
        with storage_guard("insert_minister"):
            try:
                with self._engine.begin() as conn:
                    conn.execute(
                        text("""
                            INSERT INTO ministers (id, name, email, created_at)
                            VALUES (:id, :name, :email, :created_at)
                        """),
                        record.model_dump(),
                    )
            except IntegrityError as exc:
                raise ConflictError(f"Minister '{record.id}' already exists") from exc
        return record

    def delete_minister(self, minister_id: str) -> bool:
        """Remove a minister, reopening every slot they held."""
        with storage_guard("delete_minister"):
            with self._engine.begin() as conn:
                conn.execute(
                    text("UPDATE minister_slots SET minister_id = NULL WHERE minister_id = :id"),
                    {"id": minister_id},
                )
                deleted = conn.execute(
                    text("DELETE FROM ministers WHERE id = :id"), {"id": minister_id}
                ).rowcount
        return deleted > 0
