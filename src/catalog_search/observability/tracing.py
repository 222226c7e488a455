"""OpenTelemetry spans around searches.

The library only talks to the OpenTelemetry API. :func:`init_tracing` is a
convenience for host processes that have no provider yet; exporters are
attached by the host to the returned provider.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import SpanKind

from catalog_search.observability.context import update_span_id


if TYPE_CHECKING:
    from collections.abc import Iterator

    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "catalog_search"

_tracer_holder: dict[str, Tracer | None] = {"tracer": None}


def init_tracing(service_name: str = "catalog-search", **resource_attributes: str) -> TracerProvider:
    """Install a global SDK provider tagged with ``service_name``."""
    provider = TracerProvider(resource=Resource.create({"service.name": service_name, **resource_attributes}))
    trace.set_tracer_provider(provider)
    _tracer_holder["tracer"] = provider.get_tracer(INSTRUMENTATION_NAME)
    logger.info("Tracing initialized for service: %s", service_name)
    return provider


def get_tracer() -> Tracer:
    tracer = _tracer_holder["tracer"]
    if tracer is None:
        tracer = _tracer_holder["tracer"] = trace.get_tracer(INSTRUMENTATION_NAME)
    return tracer


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Span]:
    """Open a current span and publish its id to the query log context.

    Exceptions escaping the block are recorded on the span, which is marked
    as failed, and then re-raised.
    """
    with get_tracer().start_as_current_span(
        name,
        kind=kind,
        attributes=attributes,
        record_exception=True,
        set_status_on_exception=True,
    ) as span:
        span_context = span.get_span_context()
        if span_context.is_valid:
            update_span_id(trace.format_span_id(span_context.span_id))
        yield span
