"""Query-time value objects.

Everything here is created per ``search()`` call and discarded afterwards;
nothing is cached across queries.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from catalog_search.domain.records import Domain, Record


class RangeExpr(BaseModel):
    """A ``field:min-max`` fragment of a raw query.

    ``min <= max`` is not checked; an inverted range simply matches nothing.
    """

    model_config = ConfigDict(frozen=True)

    field: str
    min: float
    max: float


class StructuredQuery(BaseModel):
    """Parsed form of a raw query string."""

    model_config = ConfigDict(frozen=True)

    must_include: list[str] = Field(default_factory=list)
    exact_phrases: list[str] = Field(default_factory=list)
    must_exclude: list[str] = Field(default_factory=list)
    ranges: list[RangeExpr] = Field(default_factory=list)
    field_filters: list[tuple[str, str]] = Field(default_factory=list)
    or_groups: list[list[str]] = Field(default_factory=list)

    @property
    def probe(self) -> str:
        """Text handed to the fuzzy indexes: terms first, then phrases."""
        return " ".join([*self.must_include, *self.exact_phrases]).strip()

    @property
    def is_empty(self) -> bool:
        return not (
            self.must_include
            or self.exact_phrases
            or self.must_exclude
            or self.ranges
            or self.field_filters
            or self.or_groups
        )


class NumericRange(BaseModel):
    """Inclusive numeric bounds; a missing bound is unbounded."""

    model_config = ConfigDict(frozen=True)

    min: float | None = None
    max: float | None = None

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        return not (self.max is not None and value > self.max)


class SearchFilters(BaseModel):
    """Structured constraints; every field is optional and ``None`` means no constraint."""

    type: list[str] | None = None
    category: list[str] | None = None
    safety: list[str] | None = None
    applications: list[str] | None = None
    difficulty: list[str] | None = None
    molecular_weight_range: NumericRange | None = None
    melting_point_range: NumericRange | None = None
    boiling_point_range: NumericRange | None = None
    atomic_number_range: NumericRange | None = None
    pka_range: NumericRange | None = None
    pkb_range: NumericRange | None = None
    group: list[int] | None = None
    period: list[int] | None = None
    block: list[str] | None = None
    element_category: list[str] | None = None
    ghs_codes: list[str] | None = None


SortKey = Literal["relevance", "name", "molecular_weight", "atomic_number", "date", "popularity"]


class SearchOptions(BaseModel):
    """Sorting, paging and matching switches.

    ``limit=None`` leaves the page size to the engine (``Settings.default_limit``).
    """

    sort_by: SortKey = "relevance"
    sort_order: Literal["asc", "desc"] = "desc"
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)
    fuzzy: bool = True
    include_synonyms: bool = False


class SearchQuery(BaseModel):
    """A complete request: raw query text plus structured filters and options."""

    query: str = ""
    filters: SearchFilters = Field(default_factory=SearchFilters)
    options: SearchOptions = Field(default_factory=SearchOptions)


class SearchResult(BaseModel):
    """One ranked hit, built fresh for every query."""

    model_config = ConfigDict(frozen=True)

    id: str
    domain_type: Domain
    title: str
    subtitle: str = ""
    description: str = ""
    category: str
    tags: list[str] = Field(default_factory=list)
    relevance: float
    raw_record: Record
    url: str
    thumbnail: str | None = None

    @property
    def haystack(self) -> str:
        """Lower-cased text used for exact substring constraints."""
        return " ".join([self.title, self.subtitle, self.description, self.category, " ".join(self.tags)]).lower()
