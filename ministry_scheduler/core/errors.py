# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Error taxonomy shared by services, repositories and the HTTP layer.
Each kind maps to one HTTP status in main.py.
"""


class SchedulingError(Exception):
    """Base class for every error the scheduling core raises on purpose."""

    kind: str = "scheduling_error"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SchedulingError):
    """Malformed input; nothing was written."""

    kind = "validation_error"
    status_code = 400


class NotFoundError(SchedulingError):
    """Referenced slot, service time or minister does not exist."""

    kind = "not_found"
    status_code = 404


class ConflictError(SchedulingError):
    """Double-booking or a storage uniqueness violation."""

    kind = "conflict"
    status_code = 409


class StorageError(SchedulingError):
    """The persistence layer failed; the caller decides whether to retry."""

    kind = "storage_unavailable"
    status_code = 503
