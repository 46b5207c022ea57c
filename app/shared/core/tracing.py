import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from app.shared.core.config import get_settings

logger = structlog.get_logger()

_configured = False


def setup_tracing(app: FastAPI | None = None) -> None:
    """
    Sets up OpenTelemetry tracing for the application.
    Spans are only exported when OTEL_EXPORTER_OTLP_ENDPOINT is configured.
    """
    global _configured
    settings = get_settings()
    if _configured:
        return

    resource = Resource(
        attributes={
            "service.name": "automate-roi-api",
            "deployment.environment": settings.ENVIRONMENT,
        }
    )
    provider = TracerProvider(resource=resource)

    if settings.OTEL_EXPORTER_OTLP_ENDPOINT and not settings.TESTING:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )

        exporter = OTLPSpanExporter(
            endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
            insecure=settings.OTEL_EXPORTER_OTLP_INSECURE,
        )
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info("setup_tracing_otlp", endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT)
    else:
        logger.info("setup_tracing_local_only")

    trace.set_tracer_provider(provider)
    _configured = True

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app)
        logger.info("fastapi_instrumented")


def set_correlation_id(correlation_id: str) -> None:
    """Sets a correlation ID on the current span."""
    current_span = trace.get_current_span()
    if current_span.is_recording():
        current_span.set_attribute("correlation_id", correlation_id)


def get_current_trace_id() -> str | None:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format(span_context.trace_id, "032x")
