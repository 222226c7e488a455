"""Centralized configuration for catalog-search using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Values are validated once, when the engine is built; query-time code
    only reads them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Matching
    fuzzy_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Maximum normalized distance for a fuzzy field match (0 = exact only)",
    )
    missing_attribute_policy: Literal["pass", "fail"] = Field(
        default="pass",
        description="Whether a record lacking a numeric attribute passes ('pass') or fails ('fail') a range filter",
    )
    filter_only_browse: bool = Field(
        default=False,
        description="List the catalog for queries made only of filters, ranges or exclusions; "
        "by default only an empty query lists the catalog and such queries match nothing",
    )

    # Limits
    default_limit: int = Field(default=20, ge=1, description="Page size used when a query does not set a limit")
    max_query_length: int = Field(
        default=500, ge=1, description="Queries longer than this are truncated before parsing"
    )
    suggestion_limit: int = Field(default=10, ge=1, description="Maximum number of autocomplete suggestions")

    # Seed data
    catalog_dir: Path | None = Field(
        default=None,
        description="Directory holding compounds.json, elements.json, calculators.json and help.json; "
        "the bundled sample catalogs are used when unset",
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")
