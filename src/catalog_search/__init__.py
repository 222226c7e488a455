"""catalog-search: one query language over the compound, element, calculator and help catalogs."""

from catalog_search.catalogs import CatalogError, Catalogs, build_catalogs, load_catalogs
from catalog_search.config import Settings
from catalog_search.domain.records import Domain
from catalog_search.domain.search import (
    NumericRange,
    RangeExpr,
    SearchFilters,
    SearchOptions,
    SearchQuery,
    SearchResult,
    StructuredQuery,
)
from catalog_search.engine import SearchEngine, setup_observability
from catalog_search.search.query_parser import parse_query


__all__ = [
    "CatalogError",
    "Catalogs",
    "Domain",
    "NumericRange",
    "RangeExpr",
    "SearchEngine",
    "SearchFilters",
    "SearchOptions",
    "SearchQuery",
    "SearchResult",
    "Settings",
    "StructuredQuery",
    "build_catalogs",
    "load_catalogs",
    "parse_query",
    "setup_observability",
]
