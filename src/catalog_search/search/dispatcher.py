"""Query dispatch across the per-domain fuzzy indexes.

The dispatcher is the recall pass: it turns a structured query into a flat,
unfiltered candidate list. Boolean precision (OR groups, NOT) and structured
filters are applied afterwards by the constraint and filter evaluators.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
import logging

from catalog_search.domain.records import (
    CalculatorRecord,
    CompoundRecord,
    Domain,
    ElementRecord,
    HelpRecord,
)
from catalog_search.domain.search import SearchResult, StructuredQuery
from catalog_search.search.fuzzy import FuzzyIndex
from catalog_search.search.synonyms import SynonymExpander


logger = logging.getLogger(__name__)

HELP_SUBTITLE_LENGTH = 100


def _format_number(value: float) -> str:
    return f"{value:g}"


def compound_result(record: CompoundRecord, relevance: float) -> SearchResult:
    weight = _format_number(record.molecular_mass) if record.molecular_mass is not None else "unknown"
    description = f"Molecular weight: {weight} g/mol."
    if record.appearance:
        description = f"{description} {record.appearance}"
    return SearchResult(
        id=f"compound-{record.id}",
        domain_type=Domain.COMPOUND,
        title=record.name,
        subtitle=record.formula,
        description=description,
        category="Chemical Compound",
        tags=list(record.tags),
        relevance=relevance,
        raw_record=record,
        url=f"/compounds/{record.id}",
        thumbnail="/icons/compound.svg",
    )


def element_result(record: ElementRecord, relevance: float) -> SearchResult:
    return SearchResult(
        id=f"element-{record.atomic_number}",
        domain_type=Domain.ELEMENT,
        title=f"{record.name} ({record.symbol})",
        subtitle=f"Atomic Number: {record.atomic_number}",
        description=f"Atomic mass: {_format_number(record.atomic_mass)} u. Category: {record.category}",
        category="Chemical Element",
        tags=list(record.tags),
        relevance=relevance,
        raw_record=record,
        url=f"/periodic-table?element={record.atomic_number}",
        thumbnail=f"/icons/elements/{record.symbol.lower()}.svg",
    )


def calculator_result(record: CalculatorRecord, relevance: float) -> SearchResult:
    return SearchResult(
        id=f"calculator-{record.id}",
        domain_type=Domain.CALCULATOR,
        title=record.name,
        subtitle=record.description,
        description=f"Category: {record.category}. Difficulty: {record.difficulty}",
        category="Calculator",
        tags=list(record.tags),
        relevance=relevance,
        raw_record=record,
        url=record.url,
        thumbnail=f"/icons/calculators/{record.category}.svg",
    )


def help_result(record: HelpRecord, relevance: float) -> SearchResult:
    subtitle = record.content
    if len(subtitle) > HELP_SUBTITLE_LENGTH:
        subtitle = subtitle[:HELP_SUBTITLE_LENGTH] + "..."
    return SearchResult(
        id=f"help-{record.id}",
        domain_type=Domain.HELP,
        title=record.title,
        subtitle=subtitle,
        description=record.content,
        category="Help & Documentation",
        tags=list(record.tags),
        relevance=relevance,
        raw_record=record,
        url=record.url,
    )


RESULT_BUILDERS: dict[Domain, Callable[..., SearchResult]] = {
    Domain.COMPOUND: compound_result,
    Domain.ELEMENT: element_result,
    Domain.CALCULATOR: calculator_result,
    Domain.HELP: help_result,
}


def eligible_domains(type_filter: Iterable[str] | None) -> list[Domain]:
    """Domains named by ``type_filter`` in canonical order; all domains when absent."""
    if type_filter is None:
        return list(Domain)
    wanted = {value.lower() for value in type_filter}
    return [domain for domain in Domain if domain.value in wanted]


def is_browse(parsed: StructuredQuery, *, filter_only_browse: bool = False) -> bool:
    """Whether ``parsed`` lists the catalog instead of going through the fuzzy indexes.

    Only an entirely empty query browses. With ``filter_only_browse`` a query
    made of filters, ranges or exclusions alone browses too.
    """
    if filter_only_browse:
        return not parsed.probe
    return parsed.is_empty


def _probes(parsed: StructuredQuery, synonyms: SynonymExpander | None) -> list[str]:
    probe = parsed.probe
    if synonyms is None:
        return [probe]
    terms: Sequence[str] = [*parsed.must_include, *parsed.exact_phrases]
    return [probe, *synonyms.alternative_probes(terms)]


def dispatch(
    parsed: StructuredQuery,
    indexes: Mapping[Domain, FuzzyIndex],
    type_filter: Sequence[str] | None = None,
    *,
    fuzzy: bool = True,
    synonyms: SynonymExpander | None = None,
    filter_only_browse: bool = False,
) -> list[SearchResult]:
    """Run ``parsed`` against every eligible domain index.

    Args:
        parsed: Structured query from the parser.
        indexes: One fuzzy index per domain.
        type_filter: Domain identifiers to search; ``None`` searches all.
        fuzzy: Approximate matching when True, substring matching otherwise.
        synonyms: When given, synonym variants of the probe are also run and
            each record keeps its best relevance.
        filter_only_browse: Also browse when the query has filters but no text.

    Returns:
        Unfiltered candidates, grouped by domain in canonical order.
    """
    domains = [domain for domain in eligible_domains(type_filter) if domain in indexes]

    if is_browse(parsed, filter_only_browse=filter_only_browse):
        results = [
            RESULT_BUILDERS[domain](record, 1.0) for domain in domains for record in indexes[domain].records
        ]
        logger.debug("Browse mode over %s produced %d candidates", [d.value for d in domains], len(results))
        return results

    probes = _probes(parsed, synonyms)
    results: list[SearchResult] = []
    for domain in domains:
        best: dict[int, tuple[object, float]] = {}
        index = indexes[domain]
        for probe in probes:
            for record, raw_score in index.search(probe, fuzzy=fuzzy):
                relevance = 1.0 - raw_score
                key = id(record)
                if key not in best or relevance > best[key][1]:
                    best[key] = (record, relevance)
        results.extend(RESULT_BUILDERS[domain](record, relevance) for record, relevance in best.values())

    logger.debug("Dispatched %d probe(s) to %d domain(s): %d candidates", len(probes), len(domains), len(results))
    return results
