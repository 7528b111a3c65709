# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository: one-time markers kept in the schema_meta table."""
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from ministry_scheduler.repositories.base import storage_guard, utc_now_iso

SEEDED_MARKER = "default_data_seeded"


class SchemaMetaRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    def get_marker(self, key: str) -> Optional[str]:
        with storage_guard("get_marker"):
            with self._engine.connect() as conn:
                return conn.execute(
                    text("SELECT value FROM schema_meta WHERE key = :key"), {"key": key}
                ).scalar()

    def set_marker(self, key: str, value: str) -> None:
        with storage_guard("set_marker"):
            with self._engine.begin() as conn:
                updated = conn.execute(
                    text("UPDATE schema_meta SET value = :value, updated_at = :now WHERE key = :key"),
                    {"key": key, "value": value, "now": utc_now_iso()},
                ).rowcount
                if not updated:
                    conn.execute(
                        text("""
                            INSERT INTO schema_meta (key, value, updated_at)
                            VALUES (:key, :value, :now)
                        """),
                        {"key": key, "value": value, "now": utc_now_iso()},
                    )
