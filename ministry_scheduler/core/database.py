# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy engine factory and the relational schema the scheduler needs."""
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from ministry_scheduler.core.config import settings
from ministry_scheduler.core.logging import get_logger

logger = get_logger(__name__)

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS service_times (
        id           VARCHAR(36) PRIMARY KEY,
        date         DATE NOT NULL,
        time         VARCHAR(5) NOT NULL,
        name         VARCHAR(255) NOT NULL,
        is_recurring BOOLEAN NOT NULL DEFAULT FALSE,
        positions    INTEGER NOT NULL DEFAULT 2 CHECK (positions >= 1),
        created_at   VARCHAR(40) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ministers (
        id         VARCHAR(64) PRIMARY KEY,
        name       VARCHAR(255) NOT NULL,
        email      VARCHAR(255),
        created_at VARCHAR(40) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS minister_slots (
        id          VARCHAR(36) PRIMARY KEY,
        service_id  VARCHAR(36) NOT NULL
                    REFERENCES service_times(id) ON DELETE CASCADE,
        date        DATE NOT NULL,
        position    INTEGER NOT NULL CHECK (position >= 1),
        minister_id VARCHAR(64)
                    REFERENCES ministers(id) ON DELETE SET NULL,
        created_at  VARCHAR(40) NOT NULL,
        CONSTRAINT uq_slot_position UNIQUE (service_id, date, position),
        CONSTRAINT uq_slot_minister UNIQUE (service_id, date, minister_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_minister_slots_date ON minister_slots (date)",
    """
    CREATE TABLE IF NOT EXISTS schema_meta (
        key        VARCHAR(64) PRIMARY KEY,
        value      VARCHAR(255) NOT NULL,
        updated_at VARCHAR(40) NOT NULL
    )
    """,
)


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def create_db_engine(url: str | None = None) -> Engine:
    """Build an engine for ``url`` (defaults to DATABASE_URL)."""
    url = url or settings.DATABASE_URL
    if _is_sqlite(url):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every checkout sees an empty DB
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_recycle=settings.POOL_RECYCLE,
    )


def init_schema(engine: Engine) -> None:
    """Create tables and indexes if they do not exist yet."""
    with engine.begin() as conn:
        for statement in SCHEMA_STATEMENTS:
            conn.execute(text(statement))
    logger.info("Database schema ready")


def verify_connection(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
