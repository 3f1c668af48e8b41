from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Status, StatusCode
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

logger = logging.getLogger(__name__)

UNTRACED_URLS = "/health/live,/health/ready,/metrics"

_store_tracer = trace.get_tracer("menuboard.store")


@lru_cache(maxsize=1)
def _tracer_provider(service_name: str, environment: str, endpoint: str) -> TracerProvider:
    provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: service_name, "deployment.environment": environment})
    )
    if not endpoint:
        logger.info("otel_exporter_disabled")
    else:
        try:
            exporter = OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
        except Exception:
            logger.exception("otel_exporter_setup_failed")
        else:
            provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())
    return provider


def configure_otel(app: FastAPI) -> None:
    """Install the process tracer provider and instrument ``app`` once."""
    if getattr(app.state, "otel_instrumented", False):
        return

    provider = _tracer_provider(
        os.getenv("OTEL_SERVICE_NAME", "menuboard"),
        os.getenv("APP_ENV", "local"),
        os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", ""),
    )
    FastAPIInstrumentor.instrument_app(app, tracer_provider=provider, excluded_urls=UNTRACED_URLS)
    app.state.otel_instrumented = True


@contextmanager
def store_span(operation: str, backend: str) -> Iterator[Span]:
    """Wrap one menu store round trip in a client span.

    Exceptions are recorded on the span and re-raised unchanged.
    """
    with _store_tracer.start_as_current_span(
        f"menu_store.{operation}",
        kind=trace.SpanKind.CLIENT,
        attributes={"menu_store.backend": backend, "menu_store.operation": operation},
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            raise
