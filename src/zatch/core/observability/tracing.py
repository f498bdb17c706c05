"""OpenTelemetry tracing configuration.

Traces FastAPI requests and SQLAlchemy queries. Spans are exported to an
OTLP-compatible backend when OTLP_ENDPOINT is configured, or printed to the
console in debug mode. Outbound DNS and AI gateway calls are wrapped in
manual spans obtained from ``get_tracer``.
"""

import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from sqlalchemy.ext.asyncio import AsyncEngine

from zatch import __version__
from zatch.config import settings


log = structlog.get_logger()


def setup_tracing(app: FastAPI, engine: AsyncEngine | None = None) -> bool:
    """Configure OpenTelemetry tracing for the application.

    Args:
        app: The FastAPI application instance to instrument
        engine: Optional database engine to instrument as well

    Returns:
        True when an exporter was installed, False when tracing is disabled
    """
    resource = Resource.create(
        {
            "service.name": settings.app_name.lower().replace(" ", "-"),
            "service.version": __version__,
            "deployment.environment": settings.environment,
        }
    )
    provider = TracerProvider(resource=resource)

    if settings.otlp_endpoint:
        exporter = OTLPSpanExporter(
            endpoint=settings.otlp_endpoint,
            insecure=not settings.otlp_endpoint.startswith("https"),
        )
        provider.add_span_processor(BatchSpanProcessor(exporter))
        log.info("tracing_configured", exporter="otlp", endpoint=settings.otlp_endpoint)
    elif settings.debug:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        log.info("tracing_configured", exporter="console")
    else:
        log.info("tracing_disabled", reason="no OTLP_ENDPOINT configured")
        return False

    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls="health/.*,docs,redoc,openapi.json",
    )
    if engine is not None:
        instrument_sqlalchemy(engine)

    log.info("tracing_setup_complete")
    return True


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Instrument an async SQLAlchemy engine for tracing."""
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
    log.debug("instrumented_sqlalchemy")


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer instance for manual span creation.

    Example:
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("dns_txt_lookup"):
            ...
    """
    return trace.get_tracer(name)


def shutdown_tracing() -> None:
    """Flush pending spans. Called during application shutdown."""
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()
        log.info("tracing_shutdown_complete")
