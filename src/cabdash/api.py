"""FastAPI application: dashboard websocket plus health and metrics."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import BaseModel
from redis.asyncio import Redis

from .metrics import get_metrics_collector
from .redis_subscriber import RedisSubscriber
from .settings import get_settings
from .websocket import ConnectionManager
from .websocket import router as websocket_router

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy", "degraded"
    redis_connected: bool
    active_sessions: int
    uptime_seconds: float
    message: str | None = None


class MetricsResponse(BaseModel):
    """Metrics response."""

    events_consumed_total: int
    events_consumed_per_sec: float
    validation_errors_total: int
    notifications_total: int
    send_errors_total: int
    active_sessions: int
    sessions_opened_total: int
    redis_connected: bool
    uptime_seconds: float
    timestamp: float


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    settings = get_settings()

    redis_client = Redis(
        host=settings.redis.host,
        port=settings.redis.port,
        password=settings.redis.password or None,
        db=settings.redis.db,
        decode_responses=True,
    )

    connection_manager = ConnectionManager(settings.dashboard)
    subscriber = RedisSubscriber(
        redis_client,
        connection_manager,
        channel=settings.redis.channel,
        reconnect_delay=settings.redis.reconnect_delay_seconds,
    )

    app.state.redis_client = redis_client
    app.state.connection_manager = connection_manager
    app.state.subscriber = subscriber

    get_metrics_collector().register_health_callback("redis", lambda: subscriber.is_subscribed)

    logger.info(
        f"Dashboard refresh every {settings.dashboard.refresh_interval_ms}ms, "
        f"max {settings.dashboard.max_ride_cards} cards"
    )
    await subscriber.start()

    yield

    await subscriber.stop()
    await connection_manager.close_all()
    await redis_client.close()


app = FastAPI(
    title="Taxi Ride Dashboard",
    version="1.0.0",
    description="Streams live ride notifications, cards and statistics over WebSocket",
    lifespan=lifespan,
)

app.include_router(websocket_router)


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    snapshot = get_metrics_collector().get_snapshot()

    if snapshot.redis_connected:
        status = "healthy"
        message = "Ride subscription active"
    else:
        status = "degraded"
        message = "Redis disconnected"

    return HealthResponse(
        status=status,
        redis_connected=snapshot.redis_connected,
        active_sessions=snapshot.active_sessions,
        uptime_seconds=snapshot.uptime_seconds,
        message=message,
    )


@app.get("/metrics", response_model=MetricsResponse)
def get_metrics() -> MetricsResponse:
    """Get service metrics."""
    snapshot = get_metrics_collector().get_snapshot()

    return MetricsResponse(
        events_consumed_total=snapshot.events_consumed_total,
        events_consumed_per_sec=snapshot.events_consumed_per_sec,
        validation_errors_total=snapshot.validation_errors_total,
        notifications_total=snapshot.notifications_total,
        send_errors_total=snapshot.send_errors_total,
        active_sessions=snapshot.active_sessions,
        sessions_opened_total=snapshot.sessions_opened_total,
        redis_connected=snapshot.redis_connected,
        uptime_seconds=snapshot.uptime_seconds,
        timestamp=snapshot.timestamp,
    )
