"""Result ordering and pagination."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from functools import cmp_to_key

from catalog_search.domain.records import CompoundRecord, ElementRecord
from catalog_search.domain.search import SearchOptions, SearchResult


Comparator = Callable[[SearchResult, SearchResult], float]


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def compare_relevance(a: SearchResult, b: SearchResult) -> float:
    return a.relevance - b.relevance


def compare_name(a: SearchResult, b: SearchResult) -> float:
    left, right = a.title.casefold(), b.title.casefold()
    return (left > right) - (left < right)


def compare_molecular_weight(a: SearchResult, b: SearchResult) -> float:
    left, right = a.raw_record, b.raw_record
    if not (isinstance(left, CompoundRecord) and isinstance(right, CompoundRecord)):
        return 0
    if left.molecular_mass is None or right.molecular_mass is None:
        return 0
    return left.molecular_mass - right.molecular_mass


def compare_atomic_number(a: SearchResult, b: SearchResult) -> float:
    left, right = a.raw_record, b.raw_record
    if not (isinstance(left, ElementRecord) and isinstance(right, ElementRecord)):
        return 0
    return left.atomic_number - right.atomic_number


# Ascending comparators; cross-domain pairs under a numeric key compare equal.
COMPARATORS: dict[str, Comparator] = {
    "relevance": compare_relevance,
    "name": compare_name,
    "molecular_weight": compare_molecular_weight,
    "atomic_number": compare_atomic_number,
}


def sort_results(results: Sequence[SearchResult], options: SearchOptions) -> list[SearchResult]:
    """Sort by ``options.sort_by``; keys without a comparator fall back to relevance.

    ``sort_order`` negates the comparison uniformly, so the default
    ``relevance``/``desc`` puts the best matches first. The sort is stable.
    """
    comparator = COMPARATORS.get(options.sort_by, compare_relevance)
    direction = -1 if options.sort_order == "desc" else 1

    def compare(a: SearchResult, b: SearchResult) -> int:
        return direction * _sign(comparator(a, b))

    return sorted(results, key=cmp_to_key(compare))


def paginate(results: Sequence[SearchResult], limit: int, offset: int = 0) -> list[SearchResult]:
    """Return ``results[offset:offset + limit]``; an offset past the end yields ``[]``."""
    start = max(offset, 0)
    return list(results[start : start + max(limit, 0)])


def rank(results: Sequence[SearchResult], options: SearchOptions, default_limit: int = 20) -> list[SearchResult]:
    """Sort then paginate according to ``options``; ``default_limit`` applies when no limit is set."""
    limit = default_limit if options.limit is None else options.limit
    return paginate(sort_results(results, options), limit, options.offset)
