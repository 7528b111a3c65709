# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Shared helpers for the SQLAlchemy repositories."""
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError

from ministry_scheduler.core.errors import StorageError
from ministry_scheduler.core.logging import get_logger

logger = get_logger(__name__)


@contextmanager
def storage_guard(operation: str) -> Iterator[None]:
    """Translate driver failures into StorageError, logging the cause."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Storage operation failed: %s (%s)", operation, exc)
        raise StorageError(f"Storage unavailable during {operation}") from exc


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
