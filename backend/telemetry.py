# telemetry.py - Optional request and query tracing
import os
import logging

logger = logging.getLogger("taskdesk.telemetry")

OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")


def setup_telemetry(app=None):
    """Trace API requests and SQL statements to an OTLP collector.

    Off unless OTEL_EXPORTER_OTLP_ENDPOINT is set. Returns the provider, or
    None when tracing stays off.
    """
    if not OTLP_ENDPOINT:
        logger.info("Tracing off: no OTLP endpoint configured")
        return None

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
        from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
    except ImportError:
        logger.warning("Tracing requested but the telemetry extra is not installed")
        return None

    from database import engine

    provider = TracerProvider(resource=Resource.create({
        "service.name": os.getenv("OTEL_SERVICE_NAME", "taskdesk-api"),
        "service.version": getattr(app, "version", "unknown"),
        "deployment.environment": os.getenv("ENVIRONMENT", "development"),
    }))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=OTLP_ENDPOINT, insecure=True)))
    trace.set_tracer_provider(provider)

    if app is not None:
        # Probes would drown out real traffic
        FastAPIInstrumentor.instrument_app(app, excluded_urls="health", tracer_provider=provider)
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, tracer_provider=provider)

    logger.info(f"Tracing to {OTLP_ENDPOINT}")
    return provider
