"""OpenTelemetry metrics for the ride dashboard.

Counters are recorded as events flow through the service; gauges are read
from the latest MetricsCollector snapshot when the exporter polls them.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from opentelemetry import metrics
from opentelemetry.metrics import Observation

if TYPE_CHECKING:
    from .metrics import DashboardMetrics

meter = metrics.get_meter("cabdash")

# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------
cabdash_ride_events_consumed_total = meter.create_counter(
    name="cabdash_ride_events_consumed_total",
    description="Total ride events received from the transport",
    unit="1",
)

cabdash_validation_errors_total = meter.create_counter(
    name="cabdash_validation_errors_total",
    description="Total ride payloads dropped as malformed",
    unit="1",
)

cabdash_notifications_total = meter.create_counter(
    name="cabdash_notifications_total",
    description="Total pickup/dropoff notifications sent, by status",
    unit="1",
)

cabdash_send_errors_total = meter.create_counter(
    name="cabdash_send_errors_total",
    description="Total websocket send failures",
    unit="1",
)

# ---------------------------------------------------------------------------
# Observable gauges
# ---------------------------------------------------------------------------
_snapshot_lock = threading.Lock()
_snapshot_values: dict[str, float] = {
    "active_sessions": 0.0,
    "redis_connected": 0.0,
    "uptime_seconds": 0.0,
}


def _observe(key: str) -> list[Observation]:
    with _snapshot_lock:
        return [Observation(value=_snapshot_values.get(key, 0.0))]


cabdash_active_sessions = meter.create_observable_gauge(
    name="cabdash_active_sessions",
    callbacks=[lambda options: _observe("active_sessions")],
    description="Number of connected dashboard clients",
    unit="1",
)

cabdash_redis_connected = meter.create_observable_gauge(
    name="cabdash_redis_connected",
    callbacks=[lambda options: _observe("redis_connected")],
    description="Whether the ride subscription is active (1=connected, 0=disconnected)",
    unit="1",
)

cabdash_uptime_seconds = meter.create_observable_gauge(
    name="cabdash_uptime_seconds",
    callbacks=[lambda options: _observe("uptime_seconds")],
    description="Service uptime in seconds",
    unit="s",
)


def update_snapshot_gauges(snapshot: DashboardMetrics) -> None:
    with _snapshot_lock:
        _snapshot_values["active_sessions"] = float(snapshot.active_sessions)
        _snapshot_values["redis_connected"] = 1.0 if snapshot.redis_connected else 0.0
        _snapshot_values["uptime_seconds"] = snapshot.uptime_seconds


def record_consume() -> None:
    cabdash_ride_events_consumed_total.add(1)


def record_validation_error() -> None:
    cabdash_validation_errors_total.add(1)


def record_notification(ride_status: str) -> None:
    cabdash_notifications_total.add(1, {"ride_status": ride_status})


def record_send_error() -> None:
    cabdash_send_errors_total.add(1)
