"""Logging and OpenTelemetry setup for the POS service."""

import logging
import os
import sys

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.botocore import BotocoreInstrumentor
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)

DEFAULT_OTLP_ENDPOINT = "http://localhost:4318"
SERVICE_NAME = "pos-svc"


def get_service_resource(environment: str) -> Resource:
    """Create the OpenTelemetry resource identifying this service.

    Args:
        environment: Deployment environment name

    Returns:
        Resource with service name and environment attributes
    """
    return Resource.create(
        {
            "service.name": os.getenv("OTEL_SERVICE_NAME", SERVICE_NAME),
            "deployment.environment": environment,
        }
    )


def _install_providers(resource: Resource, export: bool) -> None:
    tracer_provider = TracerProvider(resource=resource)
    metric_readers = []

    if export:
        endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_OTLP_ENDPOINT)
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces"))
        )
        metric_readers.append(
            PeriodicExportingMetricReader(
                OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics"),
                export_interval_millis=60000,
            )
        )
        logger.info(f"OpenTelemetry exporting to {endpoint}")

    trace.set_tracer_provider(tracer_provider)
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=metric_readers))


def setup_observability(app: FastAPI | None = None, environment: str = "development") -> None:
    """Initialize tracing, metrics and DynamoDB/FastAPI auto-instrumentation.

    Exporters are skipped when ``environment`` is "test".

    Args:
        app: Optional FastAPI application to instrument
        environment: Deployment environment name
    """
    _install_providers(get_service_resource(environment), export=environment != "test")

    # botocore instrumentation covers every DynamoDB call made through boto3
    BotocoreInstrumentor().instrument()

    if app is not None:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI application instrumented")

    logger.info("OpenTelemetry observability configured")


def configure_logging(log_level: str = "INFO") -> None:
    """Send JSON log lines to stdout, where Lambda and uvicorn both collect them.

    Every line carries ``service`` so POS logs can be told apart in a shared
    log group.

    Args:
        log_level: Logging level name; unknown names fall back to INFO
    """
    level_name = log_level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level_name, level = "INFO", logging.INFO

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger"},
            static_fields={"service": SERVICE_NAME},
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [stdout_handler]
    root_logger.setLevel(level)

    # boto's own debug logging is noisy and may include request payloads
    for boto_logger in ("botocore", "boto3"):
        logging.getLogger(boto_logger).setLevel(max(level, logging.INFO))

    logger.info(f"POS service logging at {level_name}")
