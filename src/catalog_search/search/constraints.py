"""Boolean precision pass over fuzzy candidates.

Fuzzy scoring alone cannot honour OR groups or exclusions, so both are
re-checked here as plain case-insensitive substring tests against each
candidate's haystack (title, subtitle, description, category and tags).
"""

from __future__ import annotations

from collections.abc import Sequence

from catalog_search.domain.search import SearchResult, StructuredQuery


def satisfies_or_groups(haystack: str, or_groups: Sequence[Sequence[str]]) -> bool:
    """Every group must have at least one term present in ``haystack``."""
    return all(any(term in haystack for term in group) for group in or_groups)


def hits_exclusion(haystack: str, excluded: Sequence[str]) -> bool:
    return any(term in haystack for term in excluded)


def apply_constraints(results: Sequence[SearchResult], parsed: StructuredQuery) -> list[SearchResult]:
    """Drop candidates that violate the OR groups or mention an excluded term.

    Args:
        results: Candidates from the dispatcher.
        parsed: Structured query holding ``or_groups`` and ``must_exclude``.

    Returns:
        Surviving candidates in their original order.
    """
    or_groups = [[term.lower() for term in group if term] for group in parsed.or_groups]
    or_groups = [group for group in or_groups if group]
    excluded = [term.lower() for term in parsed.must_exclude if term]

    if not or_groups and not excluded:
        return list(results)

    kept: list[SearchResult] = []
    for result in results:
        haystack = result.haystack
        if or_groups and not satisfies_or_groups(haystack, or_groups):
            continue
        if excluded and hits_exclusion(haystack, excluded):
            continue
        kept.append(result)
    return kept
