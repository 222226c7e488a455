"""End-to-end tests for SearchEngine over the bundled sample catalogs."""

from prometheus_client import REGISTRY
import pytest

from catalog_search import (
    NumericRange,
    SearchEngine,
    SearchFilters,
    SearchOptions,
    SearchQuery,
    Settings,
    load_catalogs,
    setup_observability,
)
from catalog_search import engine as engine_module
from catalog_search.domain.records import Domain


MW_50_TO_100 = {
    "compound-sodium-chloride",
    "compound-sulfuric-acid",
    "compound-acetic-acid",
    "compound-benzene",
    "compound-sodium-bicarbonate",
}

PKA_0_TO_5 = SearchQuery(filters=SearchFilters(type=["compound"], pka_range=NumericRange(min=0, max=5)))


def _ids(results):
    return [result.id for result in results]


@pytest.fixture(scope="module")
def filter_browse_engine():
    return SearchEngine(load_catalogs(), Settings(_env_file=None, filter_only_browse=True))


@pytest.mark.unit
class TestFuzzyQueries:
    """Free-text queries."""

    def test_typo_finds_water(self, engine):
        results = engine.search("wter")
        assert results[0].id == "compound-water"
        assert results[0].relevance > 0.5

    def test_exclusion_removes_typo_match(self, engine):
        assert engine.search("wter NOT water") == []

    def test_exact_element_outranks_compounds(self, engine):
        results = engine.search("sodium")
        assert results[0].id == "element-11"
        assert "compound-sodium-chloride" in _ids(results)

    def test_short_symbols_and_formulas_are_not_fragment_matches(self, engine):
        ids = _ids(engine.search(SearchQuery(query="chloride", options=SearchOptions(limit=100))))
        assert ids[0] == "compound-sodium-chloride"
        for unrelated in ("element-1", "element-6", "element-8", "compound-methane"):
            assert unrelated not in ids

    def test_element_symbols_inside_longer_words(self, engine):
        ids = _ids(engine.search(SearchQuery(query="benzene", options=SearchOptions(limit=100))))
        assert ids[0] == "compound-benzene"
        assert "element-7" not in ids
        assert "element-10" not in ids

    def test_phrase(self, engine):
        assert engine.search('"sulfuric acid"')[0].id == "compound-sulfuric-acid"

    def test_calculator_and_help_are_searched(self, engine):
        ids = _ids(engine.search("thermodynamics"))
        assert "calculator-thermodynamics" in ids
        assert "help-thermodynamics-basics" in ids

    def test_results_sorted_by_relevance(self, engine):
        relevances = [result.relevance for result in engine.search("acid")]
        assert relevances == sorted(relevances, reverse=True)
        assert all(0.0 <= value <= 1.0 for value in relevances)

    def test_or_group_narrows(self, engine):
        results = engine.search("sodium (chloride OR hydroxide)")
        assert set(_ids(results)) == {"compound-sodium-chloride", "compound-sodium-hydroxide"}

    def test_substring_mode(self, engine):
        ids = _ids(engine.search(SearchQuery(query="ethan", options=SearchOptions(fuzzy=False))))
        assert "compound-ethanol" in ids
        assert engine.search(SearchQuery(query="wter", options=SearchOptions(fuzzy=False))) == []

    def test_synonyms(self, engine):
        plain = _ids(engine.search("lye"))
        expanded = _ids(engine.search(SearchQuery(query="lye", options=SearchOptions(include_synonyms=True))))
        assert "compound-sodium-hydroxide" not in plain
        assert "compound-sodium-hydroxide" in expanded


@pytest.mark.unit
class TestBrowseMode:
    """Queries without any structure list the catalog."""

    def test_every_element(self, engine):
        results = engine.search(SearchQuery(filters=SearchFilters(type=["element"])))
        assert len(results) == 20
        assert {result.domain_type for result in results} == {Domain.ELEMENT}
        assert all(result.relevance == 1.0 for result in results)

    def test_empty_query_returns_first_page(self, engine):
        results = engine.search("")
        assert len(results) == 20
        assert _ids(results)[:2] == ["compound-water", "compound-heavy-water"]

    def test_structured_filters_narrow_listing(self, engine):
        results = engine.search(SearchQuery(filters=SearchFilters(type=["element"], group=[1])))
        assert [result.title for result in results] == [
            "Hydrogen (H)",
            "Lithium (Li)",
            "Sodium (Na)",
            "Potassium (K)",
        ]

    def test_group_and_period(self, engine):
        filters = SearchFilters(type=["element"], group=[1], period=[1])
        assert _ids(engine.search(SearchQuery(filters=filters))) == ["element-1"]

    def test_molecular_weight_range(self, engine):
        filters = SearchFilters(type=["compound"], molecular_weight_range=NumericRange(min=50, max=100))
        assert set(_ids(engine.search(SearchQuery(filters=filters)))) == MW_50_TO_100

    @pytest.mark.parametrize("query", ["MW:100-200", "NOT water", "type:element", "type:element group:1"])
    def test_query_without_text_matches_nothing(self, engine, query):
        assert engine.search(query) == []

    def test_sort_by_name(self, engine):
        filters = SearchFilters(type=["element"])
        ascending = engine.search(SearchQuery(filters=filters, options=SearchOptions(sort_by="name", sort_order="asc")))
        descending = engine.search(SearchQuery(filters=filters, options=SearchOptions(sort_by="name")))
        assert ascending[0].title == "Aluminium (Al)"
        assert descending[0].title == "Sulfur (S)"

    def test_sort_by_atomic_number(self, engine):
        filters = SearchFilters(type=["element"])
        results = engine.search(SearchQuery(filters=filters, options=SearchOptions(sort_by="atomic_number")))
        assert results[0].id == "element-29"
        assert results[-1].id == "element-1"


@pytest.mark.unit
class TestFilterOnlyBrowse:
    """``filter_only_browse`` lists the catalog for filter-only query strings."""

    def test_query_field_filters(self, filter_browse_engine):
        results = filter_browse_engine.search("type:element group:1")
        assert [result.title for result in results] == [
            "Hydrogen (H)",
            "Lithium (Li)",
            "Sodium (Na)",
            "Potassium (K)",
        ]
        assert all(result.relevance == 1.0 for result in results)

    def test_group_and_period(self, filter_browse_engine):
        assert _ids(filter_browse_engine.search("type:element group:1 period:1")) == ["element-1"]

    def test_molecular_weight_range(self, filter_browse_engine):
        assert set(_ids(filter_browse_engine.search("type:compound MW:50-100"))) == MW_50_TO_100

    def test_exclusion_only(self, filter_browse_engine):
        ids = _ids(filter_browse_engine.search("type:element NOT hydrogen"))
        assert len(ids) == 19
        assert "element-1" not in ids

    def test_text_queries_unchanged(self, filter_browse_engine):
        assert filter_browse_engine.search("wter")[0].id == "compound-water"
        assert filter_browse_engine.search("wter NOT water") == []


@pytest.mark.unit
class TestPaging:
    """Limit and offset through the full pipeline."""

    def test_pages_partition_the_listing(self, engine):
        everything = _ids(engine.search(SearchQuery(options=SearchOptions(limit=100))))
        assert len(everything) == 56
        pages = []
        for offset in range(0, 60, 10):
            pages.extend(_ids(engine.search(SearchQuery(options=SearchOptions(limit=10, offset=offset)))))
        assert pages == everything

    def test_pages_partition_ranked_matches(self, engine):
        everything = _ids(engine.search(SearchQuery(query="acid", options=SearchOptions(limit=100))))
        assert everything
        first, second = (
            _ids(engine.search(SearchQuery(query="acid", options=SearchOptions(limit=5, offset=offset))))
            for offset in (0, 5)
        )
        assert first + second == everything[:10]
        assert len(first) == min(5, len(everything))

    def test_zero_limit(self, engine):
        assert engine.search(SearchQuery(query="water", options=SearchOptions(limit=0))) == []

    def test_offset_past_end(self, engine):
        assert engine.search(SearchQuery(query="water", options=SearchOptions(offset=1000))) == []

    def test_default_limit_from_settings(self):
        small = SearchEngine(load_catalogs(), Settings(_env_file=None, default_limit=5))
        assert len(small.search("")) == 5
        assert len(small.search(SearchQuery())) == 5
        assert len(small.search(SearchQuery(options=SearchOptions(sort_by="name")))) == 5

    def test_explicit_limit_overrides_setting(self):
        small = SearchEngine(load_catalogs(), Settings(_env_file=None, default_limit=5))
        assert len(small.search(SearchQuery(options=SearchOptions(limit=8)))) == 8


@pytest.mark.unit
class TestMissingAttributePolicy:
    """Range filters on records lacking the attribute."""

    def test_pass(self, engine):
        ids = _ids(engine.search(PKA_0_TO_5))
        assert "compound-acetic-acid" in ids
        assert "compound-glucose" in ids
        assert "compound-water" not in ids

    def test_fail(self):
        strict = SearchEngine(load_catalogs(), Settings(_env_file=None, missing_attribute_policy="fail"))
        assert set(_ids(strict.search(PKA_0_TO_5))) == {"compound-acetic-acid", "compound-aspirin"}


@pytest.mark.unit
class TestEngineHelpers:
    """Parsing, suggestions and bookkeeping."""

    def test_parse_truncates(self, engine):
        parsed = engine.parse("a" * 600)
        assert parsed.must_include == ["a" * 500]

    def test_search_never_raises_on_odd_input(self, engine):
        for query in ('"', "NOT", "OR OR", "MW:abc", "type:()", ")(" * 300):
            assert isinstance(engine.search(query), list)

    def test_suggestions(self, engine):
        suggestions = engine.get_suggestions("sod")
        assert suggestions[:3] == ["Sodium Chloride", "Sodium Hydroxide", "Sodium Bicarbonate"]
        assert "Sodium (Na)" in suggestions

    def test_suggestions_for_domain(self, engine):
        assert engine.get_suggestions("gas", domain="calculator") == ["Gas Laws Calculator"]

    def test_popular_searches(self, engine):
        assert len(engine.get_popular_searches()) == 10

    def test_catalog_counts(self, engine):
        assert engine.catalogs.counts() == {"compounds": 16, "elements": 20, "calculators": 10, "help_docs": 10}

    def test_query_counter(self, engine):
        before = REGISTRY.get_sample_value("catalog_search_queries_total", {"mode": "browse"}) or 0.0
        engine.search(SearchQuery(filters=SearchFilters(type=["element"])))
        assert REGISTRY.get_sample_value("catalog_search_queries_total", {"mode": "browse"}) == before + 1

    def test_filter_only_query_counted_as_fuzzy(self, engine):
        before = REGISTRY.get_sample_value("catalog_search_queries_total", {"mode": "fuzzy"}) or 0.0
        engine.search("type:element")
        assert REGISTRY.get_sample_value("catalog_search_queries_total", {"mode": "fuzzy"}) == before + 1

    def test_index_gauge(self, engine):
        assert REGISTRY.get_sample_value("catalog_search_index_records", {"domain": "element"}) is not None

    def test_from_catalog_dir(self, tmp_path):
        (tmp_path / "help.json").write_text(
            '[{"id": "intro", "title": "Intro", "content": "Start here", "category": "tutorial", "url": "/help"}]'
        )
        custom = SearchEngine.from_catalog_dir(tmp_path)
        assert custom.catalogs.counts() == {"compounds": 0, "elements": 0, "calculators": 0, "help_docs": 1}
        assert _ids(custom.search("intro")) == ["help-intro"]

    def test_small_engine(self, small_engine):
        assert small_engine.search("wter")[0].id == "compound-water"


@pytest.mark.unit
class TestSetupObservability:
    """Host-process logging and tracing setup."""

    def test_uses_settings(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(engine_module, "configure_logging", lambda **kwargs: calls.update(logging=kwargs))
        monkeypatch.setattr(engine_module, "init_tracing", lambda **kwargs: calls.update(tracing=kwargs))
        setup_observability(Settings(_env_file=None, log_level="debug", log_json=False))
        assert calls["logging"] == {"level": "debug", "json_output": False}
        assert calls["tracing"] == {"service_name": "catalog-search"}
