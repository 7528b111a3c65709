# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics: single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "ministry_requests_total",
    "Total HTTP requests to the ministry scheduler",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "ministry_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "ministry_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
ASSIGNMENTS_TOTAL = Counter(
    "ministry_assignments_total",
    "Slot assignment attempts by outcome",
    ["outcome"],
)
RELEASES_TOTAL = Counter(
    "ministry_releases_total",
    "Slot releases by outcome",
    ["outcome"],
)
SLOTS_MATERIALIZED = Counter(
    "ministry_slots_materialized_total",
    "Minister slots created by materialization",
)
FALLBACK_SERVICES_APPLIED = Counter(
    "ministry_fallback_services_applied_total",
    "Times the default-services fallback registered services for a day",
)
SERVICE_TIMES_CREATED = Counter(
    "ministry_service_times_created_total",
    "Service times created",
    ["source"],
)
SERVICE_TIMES_DELETED = Counter(
    "ministry_service_times_deleted_total",
    "Service times deleted",
)
WEEK_COPIES = Counter(
    "ministry_week_copies_total",
    "Week copy operations performed",
)
CALENDAR_UPDATES = Counter(
    "ministry_calendar_updates_total",
    "calendar-data-updated broadcasts",
    ["reason"],
)
WEBHOOK_DELIVERIES = Counter(
    "ministry_webhook_deliveries_total",
    "calendar-data-updated webhook deliveries",
    ["status"],
)
SERVICE_TIMES_ACTIVE = Gauge(
    "ministry_service_times",
    "Number of configured service times",
)
MINISTERS_ACTIVE = Gauge(
    "ministry_ministers",
    "Number of ministers on the roster",
)
