# medicaledu/shared/telemetry.py
"""
Tracing for the HTTP layer and the mediator.

Spans are exported only when ``OTEL_EXPORTER_OTLP_ENDPOINT`` is set. Without
it the global no-op provider stays in place and ``get_tracer`` still returns
a usable (non-recording) tracer.
"""
from typing import Optional

import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from medicaledu import __version__
from medicaledu.shared.config import Settings, settings as default_settings

logger = structlog.get_logger()

UNTRACED_URLS = "health,docs,redoc,openapi.json"


def build_resource(config: Settings) -> Resource:
    return Resource.create(
        {
            "service.name": config.OTEL_SERVICE_NAME,
            "service.namespace": "medicaledu",
            "service.version": __version__,
            "deployment.environment": config.APP_ENV.value,
        }
    )


def setup_telemetry(config: Settings = default_settings) -> Optional[TracerProvider]:
    """
    Install the global tracer provider. Call once per process, before the
    first request is served.
    """
    endpoint = config.OTEL_EXPORTER_OTLP_ENDPOINT
    if not endpoint:
        logger.info("telemetry_disabled", reason="OTEL_EXPORTER_OTLP_ENDPOINT not set")
        return None

    provider = TracerProvider(resource=build_resource(config))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint.rstrip('/')}/v1/traces"))
    )
    if config.DEBUG:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    logger.info("telemetry_enabled", service=config.OTEL_SERVICE_NAME, endpoint=endpoint)
    return provider


def instrument_fastapi(app: FastAPI, config: Settings = default_settings) -> None:
    if config.OTEL_EXPORTER_OTLP_ENDPOINT:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=UNTRACED_URLS)


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name, __version__)
