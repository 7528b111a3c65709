# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package: re-exports the data-access classes."""
from ministry_scheduler.repositories.meta_repository import SchemaMetaRepository
from ministry_scheduler.repositories.minister_repository import MinisterRepository
from ministry_scheduler.repositories.service_time_repository import ServiceTimeRepository
from ministry_scheduler.repositories.slot_repository import SlotRepository

__all__ = ["MinisterRepository", "SchemaMetaRepository", "ServiceTimeRepository", "SlotRepository"]
