"""Ride dashboard entry point."""

import logging
import os

import uvicorn
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .logging_setup import setup_logging
from .settings import get_settings

logger = logging.getLogger(__name__)


def init_otel_sdk() -> None:
    """Initialize OpenTelemetry SDK for metrics and traces.

    Configures TracerProvider and MeterProvider with OTLP gRPC exporters
    pointing to the OTel Collector. Must run before the app module is
    imported so its meter binds to the configured provider.
    """
    resource = Resource.create(
        {
            "service.name": "cabdash",
            "service.version": "0.1.0",
            "deployment.environment": os.getenv("DEPLOYMENT_ENV", "local"),
        }
    )

    otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://otel-collector:4317")
    trace_provider = TracerProvider(resource=resource)
    trace_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
    )
    trace.set_tracer_provider(trace_provider)
    logger.info("OpenTelemetry tracing initialized (endpoint=%s)", otlp_endpoint)

    metric_reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=otlp_endpoint, insecure=True),
        export_interval_millis=4_000,
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])
    metrics.set_meter_provider(meter_provider)
    logger.info("OpenTelemetry metrics initialized")


def main() -> None:
    """Main entry point for the dashboard service."""
    settings = get_settings()

    setup_logging(
        level=settings.log_level,
        json_output=os.environ.get("LOG_FORMAT") == "json",
        environment=os.environ.get("ENVIRONMENT", "development"),
    )

    if os.environ.get("OTEL_SDK_DISABLED", "").lower() != "true":
        init_otel_sdk()

    logger.info("Starting ride dashboard...")
    logger.info(f"Redis: {settings.redis.host}:{settings.redis.port} channel={settings.redis.channel}")
    logger.info(f"HTTP/WebSocket on {settings.api.host}:{settings.api.port}")

    from .api import app

    uvicorn.run(app, host=settings.api.host, port=settings.api.port, log_level="warning")

    logger.info("Ride dashboard exited")


if __name__ == "__main__":
    main()
