"""Thread-safe metrics collector for the ride dashboard."""

import threading
import time
from collections import deque
from dataclasses import dataclass
from collections.abc import Callable


@dataclass
class DashboardMetrics:
    """Point-in-time service metrics snapshot."""

    # Totals
    events_consumed_total: int
    validation_errors_total: int
    notifications_total: int
    send_errors_total: int

    # Rates (per second, over the rolling window)
    events_consumed_per_sec: float

    # Sessions
    active_sessions: int
    sessions_opened_total: int

    # Health indicators
    redis_connected: bool

    # Timing
    uptime_seconds: float
    timestamp: float


class MetricsCollector:
    """Thread-safe rolling window metrics for the dashboard service."""

    def __init__(self, window_seconds: int = 60):
        self._window_seconds = window_seconds
        self._lock = threading.Lock()
        self._start_time = time.time()

        # Counters
        self._events_consumed = 0
        self._validation_errors = 0
        self._notifications = 0
        self._send_errors = 0
        self._sessions_opened = 0
        self._active_sessions = 0

        # Rolling window for rate calculation
        self._consume_timestamps: deque[float] = deque()

        # Health callbacks
        self._health_callbacks: dict[str, Callable[[], bool]] = {}

    def record_consume(self) -> None:
        """Record a ride event received from the transport."""
        from . import otel_exporter

        now = time.time()
        with self._lock:
            self._events_consumed += 1
            self._consume_timestamps.append(now)
            self._cleanup(now)
        otel_exporter.record_consume()

    def record_validation_error(self) -> None:
        """Record a malformed payload."""
        from . import otel_exporter

        with self._lock:
            self._validation_errors += 1
        otel_exporter.record_validation_error()

    def record_notification(self, ride_status: str) -> None:
        """Record a pickup/dropoff notification."""
        from . import otel_exporter

        with self._lock:
            self._notifications += 1
        otel_exporter.record_notification(ride_status)

    def record_send_error(self) -> None:
        """Record a failed websocket send."""
        from . import otel_exporter

        with self._lock:
            self._send_errors += 1
        otel_exporter.record_send_error()

    def record_session_opened(self) -> None:
        with self._lock:
            self._sessions_opened += 1
            self._active_sessions += 1

    def record_session_closed(self) -> None:
        with self._lock:
            self._active_sessions = max(0, self._active_sessions - 1)

    def register_health_callback(self, name: str, callback: Callable[[], bool]) -> None:
        """Register a health check callback."""
        with self._lock:
            self._health_callbacks[name] = callback

    def _cleanup(self, now: float) -> None:
        """Remove old samples outside window. Must be called with lock held."""
        cutoff = now - self._window_seconds
        while self._consume_timestamps and self._consume_timestamps[0] < cutoff:
            self._consume_timestamps.popleft()

    def get_snapshot(self) -> DashboardMetrics:
        """Get current metrics snapshot."""
        from . import otel_exporter

        now = time.time()

        with self._lock:
            self._cleanup(now)

            elapsed = now - self._start_time
            window = min(self._window_seconds, elapsed) if elapsed > 0 else 1.0
            consumed_per_sec = len(self._consume_timestamps) / window

            redis_connected = True
            callback = self._health_callbacks.get("redis")
            if callback is not None:
                try:
                    redis_connected = callback()
                except Exception:
                    redis_connected = False

            snapshot = DashboardMetrics(
                events_consumed_total=self._events_consumed,
                validation_errors_total=self._validation_errors,
                notifications_total=self._notifications,
                send_errors_total=self._send_errors,
                events_consumed_per_sec=consumed_per_sec,
                active_sessions=self._active_sessions,
                sessions_opened_total=self._sessions_opened,
                redis_connected=redis_connected,
                uptime_seconds=elapsed,
                timestamp=now,
            )

        otel_exporter.update_snapshot_gauges(snapshot)

        return snapshot


# Global singleton
_collector: MetricsCollector | None = None
_lock = threading.Lock()


def get_metrics_collector() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _collector
    with _lock:
        if _collector is None:
            _collector = MetricsCollector()
        return _collector


def reset_metrics_collector() -> None:
    """Drop the global collector so the next call starts fresh."""
    global _collector
    with _lock:
        _collector = None
