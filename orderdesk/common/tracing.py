"""OpenTelemetry setup, enabled through `tracing_enabled`.

The provider is returned to the app factory so the lifespan can flush and shut
it down after the store is closed.
"""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

# Health checks and scrapes would drown out order activity.
UNTRACED_URLS = "health,metrics"


def setup_tracing(
    service_name: str,
    endpoint: str,
    mongo_db_name: str,
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Create, register and return a tracer provider exporting over OTLP/HTTP."""

    resource = Resource.create({"service.name": service_name, "db.system": "mongodb", "db.name": mongo_db_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(exporter or OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)
    return provider


def instrument_app(app: FastAPI, provider: TracerProvider) -> None:
    """Attach FastAPI request spans to `provider`, skipping health and metrics."""

    FastAPIInstrumentor.instrument_app(app, tracer_provider=provider, excluded_urls=UNTRACED_URLS)
