"""
OpenTelemetry Distributed Tracing

Configures OpenTelemetry for request and service-level tracing.
Spans are exported over OTLP/HTTP to any compatible collector (Jaeger, Tempo, ...).
"""

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)

_tracer: Optional[trace.Tracer] = None
_initialized = False


def setup_tracing(
    service_name: str = "bazaar-backend",
    otlp_endpoint: str = "http://localhost:4318/v1/traces",
    enable: bool = True,
) -> None:
    """
    Initialize OpenTelemetry tracing with an OTLP exporter.

    Args:
        service_name: Name of the service for tracing
        otlp_endpoint: Collector endpoint receiving OTLP/HTTP spans
        enable: Enable/disable tracing

    Example:
        setup_tracing(
            service_name="bazaar-backend",
            otlp_endpoint="http://collector:4318/v1/traces",
        )
    """
    global _initialized

    if _initialized:
        logger.warning("Tracing already initialized. Skipping.")
        return

    if not enable:
        logger.info("Tracing disabled via configuration")
        return

    try:
        resource = Resource(attributes={SERVICE_NAME: service_name})

        tracer_provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(tracer_provider)

        # Batch spans before export
        tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
        logger.info(f"OTLP tracing configured: {otlp_endpoint}")

        # Auto-instrument Django (traces all HTTP requests)
        DjangoInstrumentor().instrument()
        logger.info("Django auto-instrumentation enabled")

        _initialized = True
        logger.info(f"OpenTelemetry tracing initialized for service: {service_name}")

    except Exception as e:
        logger.error(f"Failed to initialize tracing: {e}")


def get_tracer(name: str = __name__) -> trace.Tracer:
    """
    Get tracer instance for creating custom spans.

    When tracing is disabled this returns OpenTelemetry's no-op tracer, so
    callers never need to check configuration before opening a span.

    Example:
        tracer = get_tracer(__name__)

        with tracer.start_as_current_span("my_operation"):
            ...
    """
    global _tracer

    if _tracer is None:
        _tracer = trace.get_tracer(name)

    return _tracer


tracer = get_tracer("bazaar")
