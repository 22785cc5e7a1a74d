from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from bazaarbuddy.models import db

_provider = None


def init_tracing(app):
    """Initialize OpenTelemetry tracing for the Flask app.

    The tracer provider is process-wide; apps created later (tests build
    several) reuse it and only get their own Flask/engine instrumentation.
    """
    global _provider
    if _provider is None:
        service_name = app.config.get("OTEL_SERVICE_NAME", "bazaarbuddy-backend")
        _provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
        if not app.config.get("TESTING"):
            endpoint = app.config.get("OTEL_EXPORTER_OTLP_ENDPOINT")
            _provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
        trace.set_tracer_provider(_provider)
        set_global_textmap(TraceContextTextMapPropagator())

    FlaskInstrumentor().instrument_app(app)
    with app.app_context():
        SQLAlchemyInstrumentor().instrument(engine=db.engine)


tracer = trace.get_tracer("bazaarbuddy")
