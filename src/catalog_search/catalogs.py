"""Seed catalog loading.

The four catalogs are plain JSON arrays in the documented raw shape
(camelCase keys). They are read once at startup and normalized into records;
nothing here is touched again at query time.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from importlib import resources
import logging
from pathlib import Path
from typing import Any

import orjson
from pydantic import ValidationError

from catalog_search.domain.records import CalculatorRecord, CompoundRecord, ElementRecord, HelpRecord
from catalog_search.search.normalizer import (
    normalize_calculator,
    normalize_compound,
    normalize_element,
    normalize_help,
)


logger = logging.getLogger(__name__)

CATALOG_FILES = {
    "compounds": "compounds.json",
    "elements": "elements.json",
    "calculators": "calculators.json",
    "help_docs": "help.json",
}


class CatalogError(ValueError):
    """A seed catalog could not be read or normalized."""


@dataclass(frozen=True)
class Catalogs:
    """Normalized records for every domain, in catalog order."""

    compounds: tuple[CompoundRecord, ...] = field(default_factory=tuple)
    elements: tuple[ElementRecord, ...] = field(default_factory=tuple)
    calculators: tuple[CalculatorRecord, ...] = field(default_factory=tuple)
    help_docs: tuple[HelpRecord, ...] = field(default_factory=tuple)

    def counts(self) -> dict[str, int]:
        return {
            "compounds": len(self.compounds),
            "elements": len(self.elements),
            "calculators": len(self.calculators),
            "help_docs": len(self.help_docs),
        }


def _normalize_all(name: str, entries: Sequence[Mapping[str, Any]], normalize: Callable[[Mapping[str, Any]], Any]):
    records = []
    for position, entry in enumerate(entries):
        try:
            records.append(normalize(entry))
        except (KeyError, TypeError, ValidationError) as exc:
            raise CatalogError(f"{name}[{position}] is not a valid entry: {exc!r}") from exc
    return tuple(records)


def build_catalogs(
    compounds: Sequence[Mapping[str, Any]] = (),
    elements: Sequence[Mapping[str, Any]] = (),
    calculators: Sequence[Mapping[str, Any]] = (),
    help_docs: Sequence[Mapping[str, Any]] = (),
) -> Catalogs:
    """Normalize raw catalog entries into :class:`Catalogs`.

    Raises:
        CatalogError: If an entry is missing a required key or has a bad value.
    """
    return Catalogs(
        compounds=_normalize_all("compounds", compounds, normalize_compound),
        elements=_normalize_all("elements", elements, normalize_element),
        calculators=_normalize_all("calculators", calculators, normalize_calculator),
        help_docs=_normalize_all("help_docs", help_docs, normalize_help),
    )


def _read_json(name: str, raw: bytes) -> list[dict[str, Any]]:
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise CatalogError(f"{name} is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise CatalogError(f"{name} must contain a JSON array, got {type(data).__name__}")
    return data


def load_catalogs(directory: Path | str | None = None) -> Catalogs:
    """Load the four seed catalogs.

    Args:
        directory: Folder holding ``compounds.json``, ``elements.json``,
            ``calculators.json`` and ``help.json``. A missing file leaves that
            domain empty. When None, the bundled sample catalogs are used.

    Raises:
        CatalogError: If a file is malformed.
    """
    raw: dict[str, list[dict[str, Any]]] = {}
    if directory is None:
        package_data = resources.files("catalog_search") / "data"
        for key, filename in CATALOG_FILES.items():
            raw[key] = _read_json(filename, (package_data / filename).read_bytes())
        source = "bundled sample data"
    else:
        base = Path(directory)
        for key, filename in CATALOG_FILES.items():
            path = base / filename
            if not path.exists():
                logger.warning("Catalog file %s not found; %s will be empty", path, key)
                raw[key] = []
                continue
            raw[key] = _read_json(str(path), path.read_bytes())
        source = str(base)

    catalogs = build_catalogs(**raw)
    logger.info("Loaded catalogs from %s: %s", source, catalogs.counts())
    return catalogs
