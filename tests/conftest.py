"""Shared test fixtures and configuration."""

import os
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


# Settings are read from the environment; pin every value tests rely on
TEST_ENV = {
    "FUZZY_THRESHOLD": "0.3",
    "MISSING_ATTRIBUTE_POLICY": "pass",
    "FILTER_ONLY_BROWSE": "false",
    "DEFAULT_LIMIT": "20",
    "MAX_QUERY_LENGTH": "500",
    "SUGGESTION_LIMIT": "10",
    "LOG_LEVEL": "info",
    "LOG_JSON": "true",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value
os.environ.pop("CATALOG_DIR", None)

# Now we can safely import settings-dependent modules
from catalog_search import SearchEngine, Settings, build_catalogs
from catalog_search.domain.records import (
    CalculatorRecord,
    CompoundRecord,
    Domain,
    ElementRecord,
    HelpRecord,
)
from catalog_search.search.fuzzy import FuzzyIndex
from tests.fixtures.sample_catalogs import RAW_CALCULATORS, RAW_COMPOUNDS, RAW_ELEMENTS, RAW_HELP


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset settings-related environment variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("CATALOG_DIR", raising=False)


@pytest.fixture
def small_catalogs():
    """A handful of normalized records per domain."""
    return build_catalogs(
        compounds=RAW_COMPOUNDS,
        elements=RAW_ELEMENTS,
        calculators=RAW_CALCULATORS,
        help_docs=RAW_HELP,
    )


@pytest.fixture
def small_indexes(small_catalogs):
    """One fuzzy index per domain over ``small_catalogs``."""
    record_types = {
        Domain.COMPOUND: (CompoundRecord, small_catalogs.compounds),
        Domain.ELEMENT: (ElementRecord, small_catalogs.elements),
        Domain.CALCULATOR: (CalculatorRecord, small_catalogs.calculators),
        Domain.HELP: (HelpRecord, small_catalogs.help_docs),
    }
    return {
        domain: FuzzyIndex(records, record_type.SEARCH_KEYS, identifier_keys=record_type.IDENTIFIER_KEYS)
        for domain, (record_type, records) in record_types.items()
    }


@pytest.fixture
def small_engine(small_catalogs):
    """Engine over the small fixture catalogs."""
    return SearchEngine(small_catalogs, Settings())


@pytest.fixture(scope="session")
def engine():
    """Engine over the bundled sample catalogs, built once per session."""
    return SearchEngine.from_catalog_dir(settings=Settings(_env_file=None))
