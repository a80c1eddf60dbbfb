"""OpenTelemetry tracing for reconciliations.

Tracing is off unless ``OTEL_TRACES_ENABLED=true``; ``trace_span`` is then a
no-op and yields None.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Tracer

from . import __version__

logger = logging.getLogger(__name__)

_tracer: Tracer | None = None


def _tracer_provider(service_name: str, endpoint: str) -> TracerProvider:
    resource = Resource.create({
        "service.name": service_name,
        "service.version": os.getenv("OTEL_SERVICE_VERSION", __version__),
    })
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    return provider


def initialize_tracing(service_name: str = "ipoib-network-operator") -> None:
    """Export spans over OTLP/gRPC when enabled.

    Environment Variables:
        OTEL_TRACES_ENABLED: "true" to enable (default: disabled)
        OTEL_SERVICE_NAME: Service name (default: ipoib-network-operator)
        OTEL_EXPORTER_OTLP_ENDPOINT: Collector endpoint (default: http://localhost:4317)
    """
    global _tracer

    if os.getenv("OTEL_TRACES_ENABLED", "false").lower() != "true":
        logger.debug("Tracing disabled")
        return

    service_name = os.getenv("OTEL_SERVICE_NAME", service_name)
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")
    try:
        trace.set_tracer_provider(_tracer_provider(service_name, endpoint))
    except Exception as e:
        # The operator keeps running without spans
        logger.warning(f"Failed to initialize tracing: {e}")
        return

    _tracer = trace.get_tracer(service_name)
    logger.info(f"Exporting traces to {endpoint} as {service_name}")


def get_tracer() -> Tracer | None:
    return _tracer


@contextmanager
def trace_span(
    name: str,
    kind: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Span | None]:
    """Run the block in a child span of the current one.

    Exceptions leaving the block are recorded on the span and re-raised.

    Args:
        name: Span name
        kind: Resource kind, recorded as ``resource.kind``
        attributes: Extra span attributes
    """
    tracer = get_tracer()
    if tracer is None:
        yield None
        return

    attrs = dict(attributes or {})
    if kind:
        attrs["resource.kind"] = kind

    with tracer.start_as_current_span(name, attributes=attrs, record_exception=False) as span:
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(trace.Status(trace.StatusCode.ERROR, type(e).__name__))
            raise


def add_span_attribute(key: str, value: Any) -> None:
    """Set an attribute on the current span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute(key, value)


def current_trace_ids() -> dict[str, str]:
    """Trace and span id of the current span, empty outside a valid span."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {}
    return {
        "trace_id": format(span_context.trace_id, "032x"),
        "span_id": format(span_context.span_id, "016x"),
    }
