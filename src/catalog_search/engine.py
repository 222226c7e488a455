"""Catalog Search Engine.

Single entry point for the surrounding application. Indexes are built once in
the constructor and only read afterwards, so one engine can be shared by any
number of concurrent callers.

Query pipeline:
    raw query -> parse -> dispatch (fuzzy recall) -> OR/NOT constraints
    -> structured filters -> sort -> paginate
"""

from __future__ import annotations

import logging
from pathlib import Path

from catalog_search.catalogs import Catalogs, load_catalogs
from catalog_search.config import Settings
from catalog_search.domain.records import CalculatorRecord, CompoundRecord, Domain, ElementRecord, HelpRecord
from catalog_search.domain.search import SearchQuery, SearchResult, StructuredQuery
from catalog_search.observability import (
    EMPTY_RESULT_COUNT,
    INDEX_RECORD_COUNT,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    SUGGESTION_COUNT,
    configure_logging,
    create_span,
    init_tracing,
    query_scope,
    track_latency,
)
from catalog_search.search.constraints import apply_constraints
from catalog_search.search.dispatcher import dispatch, is_browse
from catalog_search.search.filters import FilterEvaluator, merge_query_filters
from catalog_search.search.fuzzy import FuzzyIndex
from catalog_search.search.query_parser import parse_query
from catalog_search.search.ranking import rank
from catalog_search.search.suggestions import SuggestionEngine, get_popular_searches
from catalog_search.search.synonyms import SynonymExpander


logger = logging.getLogger(__name__)

RECORD_TYPES = {
    Domain.COMPOUND: CompoundRecord,
    Domain.ELEMENT: ElementRecord,
    Domain.CALCULATOR: CalculatorRecord,
    Domain.HELP: HelpRecord,
}


class SearchEngine:
    """Unified search over the compound, element, calculator and help catalogs.

    Interface Methods:
    - search(query) -> list[SearchResult]
    - get_suggestions(query, domain) -> list[str]
    - get_popular_searches() -> list[str]
    - parse(query) -> StructuredQuery
    """

    def __init__(self, catalogs: Catalogs, settings: Settings | None = None):
        """Build every domain index from ``catalogs``.

        Args:
            catalogs: Normalized seed records.
            settings: Engine configuration; defaults are read from the environment.
        """
        self._settings = settings or Settings()
        self._catalogs = catalogs

        # Build into a local mapping and publish it in one assignment
        indexes: dict[Domain, FuzzyIndex] = {}
        for domain, records in (
            (Domain.COMPOUND, catalogs.compounds),
            (Domain.ELEMENT, catalogs.elements),
            (Domain.CALCULATOR, catalogs.calculators),
            (Domain.HELP, catalogs.help_docs),
        ):
            indexes[domain] = FuzzyIndex(
                records,
                RECORD_TYPES[domain].SEARCH_KEYS,
                threshold=self._settings.fuzzy_threshold,
                identifier_keys=RECORD_TYPES[domain].IDENTIFIER_KEYS,
            )
            INDEX_RECORD_COUNT.labels(domain=domain.value).set(len(records))
        self._indexes = indexes

        self._filters = FilterEvaluator(self._settings.missing_attribute_policy)
        self._synonyms = SynonymExpander()
        self._suggestions = SuggestionEngine(
            catalogs.compounds,
            catalogs.elements,
            catalogs.calculators,
            catalogs.help_docs,
            limit=self._settings.suggestion_limit,
        )

        logger.info("Initialized SearchEngine with %s", catalogs.counts())

    @classmethod
    def from_catalog_dir(cls, directory: Path | str | None = None, settings: Settings | None = None) -> SearchEngine:
        """Load seed catalogs (bundled samples when no directory is given) and build an engine."""
        settings = settings or Settings()
        return cls(load_catalogs(directory if directory is not None else settings.catalog_dir), settings)

    @property
    def catalogs(self) -> Catalogs:
        return self._catalogs

    def parse(self, query: str) -> StructuredQuery:
        """Parse ``query`` the way :meth:`search` does, including truncation."""
        return parse_query(self._truncate(query))

    def search(self, query: SearchQuery | str) -> list[SearchResult]:
        """Run a query through the full pipeline.

        Never raises for bad input: malformed syntax degrades to plain terms and
        out-of-range paging yields an empty page.

        Args:
            query: A SearchQuery, or a bare query string with default filters and options.
                An unset ``options.limit`` falls back to ``Settings.default_limit``.

        Returns:
            The requested page of ranked results.
        """
        if isinstance(query, str):
            query = SearchQuery(query=query)

        parsed = self.parse(query.query)
        filter_only_browse = self._settings.filter_only_browse
        mode = "browse" if is_browse(parsed, filter_only_browse=filter_only_browse) else "fuzzy"

        with query_scope(mode=mode), create_span(
            "catalog_search.search",
            attributes={"search.mode": mode, "search.query_length": len(query.query)},
        ) as span, track_latency(SEARCH_LATENCY, mode=mode):
            filters = merge_query_filters(parsed, query.filters)
            options = query.options

            candidates = dispatch(
                parsed,
                self._indexes,
                filters.type,
                fuzzy=options.fuzzy,
                synonyms=self._synonyms if options.include_synonyms else None,
                filter_only_browse=filter_only_browse,
            )
            constrained = apply_constraints(candidates, parsed)
            filtered = self._filters.apply(constrained, filters)
            page = rank(filtered, options, default_limit=self._settings.default_limit)

            span.set_attribute("search.candidates", len(candidates))
            span.set_attribute("search.matches", len(filtered))
            logger.debug(
                "Search %r: %d candidates, %d after constraints, %d after filters, %d returned",
                query.query,
                len(candidates),
                len(constrained),
                len(filtered),
                len(page),
            )

        SEARCH_COUNT.labels(mode=mode).inc()
        if not filtered:
            EMPTY_RESULT_COUNT.labels(mode=mode).inc()
        return page

    def get_suggestions(self, query: str, domain: str | None = None) -> list[str]:
        """Autocomplete suggestions for a partial query."""
        SUGGESTION_COUNT.inc()
        return self._suggestions.suggest(self._truncate(query), domain)

    def get_popular_searches(self) -> list[str]:
        return get_popular_searches()

    def _truncate(self, query: str) -> str:
        query = query or ""
        limit = self._settings.max_query_length
        if len(query) > limit:
            logger.debug("Truncating query from %d to %d characters", len(query), limit)
            return query[:limit]
        return query


def setup_observability(settings: Settings | None = None) -> None:
    """Configure logging and tracing for a host process from ``settings``."""
    settings = settings or Settings()
    configure_logging(level=settings.log_level, json_output=settings.log_json)
    init_tracing(service_name="catalog-search")
