# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: calendar-data-updated broadcaster.
Fire-and-forget, no payload: consumers re-pull full state on every signal.
In-process subscribers are called synchronously; an optional webhook is
POSTed with timeout & fault tolerance.
"""

from typing import Callable

import httpx

from ministry_scheduler.core.config import settings
from ministry_scheduler.core.logging import get_logger
from ministry_scheduler.metrics.prometheus import CALENDAR_UPDATES, WEBHOOK_DELIVERIES

logger = get_logger(__name__)

CALENDAR_DATA_UPDATED = "calendar-data-updated"

Subscriber = Callable[[], None]


class CalendarEvents:
    """Broadcasts the calendar-data-updated signal after every mutation."""

    def __init__(self, webhook_url: str | None = None) -> None:
        self._subscribers: list[Subscriber] = []
        self._webhook_url = settings.CALENDAR_WEBHOOK_URL if webhook_url is None else webhook_url

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, reason: str) -> None:
        """Notify every subscriber. Failures are logged but never raised."""
        CALENDAR_UPDATES.labels(reason=reason).inc()
        for callback in list(self._subscribers):
            try:
                callback()
            except Exception as exc:
                logger.warning("Calendar subscriber failed: %s", exc)
        if self._webhook_url:
            self._post_webhook(reason)
        logger.info("Broadcast %s: reason=%s", CALENDAR_DATA_UPDATED, reason)

    def _post_webhook(self, reason: str) -> None:
        try:
            with httpx.Client(timeout=settings.NOTIFICATION_TIMEOUT) as client:
                resp = client.post(self._webhook_url, json={"event": CALENDAR_DATA_UPDATED})
            WEBHOOK_DELIVERIES.labels(status=str(resp.status_code)).inc()
            logger.info("Calendar webhook delivered: reason=%s, status=%d", reason, resp.status_code)
        except Exception as exc:
            WEBHOOK_DELIVERIES.labels(status="error").inc()
            logger.warning("Calendar webhook failed: %s", exc)
