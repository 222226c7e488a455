"""Autocomplete suggestions.

Plain case-insensitive substring tests over name and identifier fields, in
catalog order, with no fuzzy tolerance and no ranking.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import islice

from catalog_search.domain.records import (
    CalculatorRecord,
    CompoundRecord,
    Domain,
    ElementRecord,
    HelpRecord,
)


DEFAULT_SUGGESTION_LIMIT = 10

POPULAR_SEARCHES: tuple[str, ...] = (
    "water",
    "sodium chloride",
    "hydrochloric acid",
    "molecular weight",
    "stoichiometry",
    "periodic table",
    "electron configuration",
    "gas laws",
    "thermodynamics",
    "titration",
)


def get_popular_searches() -> list[str]:
    """Hand-curated list of popular queries."""
    return list(POPULAR_SEARCHES)


class SuggestionEngine:
    """Substring lookup over the identifying fields of every domain."""

    def __init__(
        self,
        compounds: Sequence[CompoundRecord] = (),
        elements: Sequence[ElementRecord] = (),
        calculators: Sequence[CalculatorRecord] = (),
        help_docs: Sequence[HelpRecord] = (),
        limit: int = DEFAULT_SUGGESTION_LIMIT,
    ) -> None:
        self._compounds = tuple(compounds)
        self._elements = tuple(elements)
        self._calculators = tuple(calculators)
        self._help_docs = tuple(help_docs)
        self._limit = limit

    def suggest(self, probe: str, domain: str | None = None) -> list[str]:
        """Suggest completions for ``probe``.

        Args:
            probe: Partial query text.
            domain: Restrict to one domain identifier (``compound``, ``element``,
                ``calculator`` or ``help``); all domains when None.

        Returns:
            At most ``limit`` distinct suggestions; empty for a blank probe.
        """
        needle = probe.strip().lower()
        if not needle:
            return []

        wanted = domain.lower() if domain else None
        candidates: list[str] = []

        if wanted in (None, Domain.COMPOUND.value):
            candidates.extend(
                self._first(
                    record.name
                    for record in self._compounds
                    if needle in record.name.lower() or needle in record.formula.lower()
                )
            )
        if wanted in (None, Domain.ELEMENT.value):
            candidates.extend(
                self._first(
                    f"{record.name} ({record.symbol})"
                    for record in self._elements
                    if needle in record.name.lower() or needle in record.symbol.lower()
                )
            )
        if wanted in (None, Domain.CALCULATOR.value):
            candidates.extend(
                self._first(
                    record.name
                    for record in self._calculators
                    if needle in record.name.lower() or needle in record.id.lower()
                )
            )
        if wanted in (None, Domain.HELP.value):
            candidates.extend(self._first(record.title for record in self._help_docs if needle in record.title.lower()))

        # dict.fromkeys keeps first-seen order
        return list(dict.fromkeys(candidates))[: self._limit]

    def _first(self, names: Iterable[str]) -> list[str]:
        return list(islice(names, self._limit))
