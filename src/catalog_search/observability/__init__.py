"""Observability module: structured logging, Prometheus metrics and OpenTelemetry spans."""

from catalog_search.observability.context import get_query_context, query_scope
from catalog_search.observability.logging import JsonFormatter, configure_logging
from catalog_search.observability.metrics import (
    EMPTY_RESULT_COUNT,
    INDEX_RECORD_COUNT,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    SUGGESTION_COUNT,
    track_latency,
)
from catalog_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "EMPTY_RESULT_COUNT",
    "INDEX_RECORD_COUNT",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "SUGGESTION_COUNT",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_query_context",
    "get_tracer",
    "init_tracing",
    "query_scope",
    "track_latency",
]
