# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration: all env-driven, zero hardcode.
Single source of truth for every tunable parameter.
"""

import os


def _csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "ministry-scheduler")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8005"))

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./ministry_scheduler.db")
    POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    # Scheduling policy
    DEFAULT_POSITIONS: int = int(os.getenv("DEFAULT_POSITIONS", "2"))
    DEFAULT_CALENDAR_DAYS: int = int(os.getenv("DEFAULT_CALENDAR_DAYS", "21"))
    MAX_CALENDAR_DAYS: int = int(os.getenv("MAX_CALENDAR_DAYS", "92"))
    WEEK_STARTS_ON: str = os.getenv("WEEK_STARTS_ON", "sunday").lower()

    # Legacy fallback: register built-in services on empty fallback weekdays
    FALLBACK_DEFAULT_SERVICES: bool = (
        os.getenv("FALLBACK_DEFAULT_SERVICES", "false").lower() == "true"
    )
    FALLBACK_WEEKDAYS: list[str] = _csv(os.getenv("FALLBACK_WEEKDAYS", "sunday"))
    # "HH:MM|Name" pairs
    FALLBACK_SERVICES: list[str] = _csv(
        os.getenv("FALLBACK_SERVICES", "09:00|Morning Mass,18:00|Evening Mass")
    )

    SEED_DEFAULT_DATA: bool = (
        os.getenv("SEED_DEFAULT_DATA", "false").lower() == "true"
    )

    CALENDAR_WEBHOOK_URL: str = os.getenv("CALENDAR_WEBHOOK_URL", "")
    NOTIFICATION_TIMEOUT: float = float(os.getenv("NOTIFICATION_TIMEOUT", "3.0"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
