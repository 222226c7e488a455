"""Prometheus metrics for search latency, volume and index size."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge, Histogram


if TYPE_CHECKING:
    from collections.abc import Generator


SEARCH_LATENCY = Histogram(
    "catalog_search_latency_seconds",
    "Search query latency",
    ["mode"],
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)

SEARCH_COUNT = Counter(
    "catalog_search_queries_total",
    "Total search queries",
    ["mode"],
)

EMPTY_RESULT_COUNT = Counter(
    "catalog_search_empty_results_total",
    "Queries that returned no results",
    ["mode"],
)

SUGGESTION_COUNT = Counter(
    "catalog_search_suggestions_total",
    "Total autocomplete lookups",
)

INDEX_RECORD_COUNT = Gauge(
    "catalog_search_index_records",
    "Records held by each domain index",
    ["domain"],
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)

