"""Synonym expansion for chemistry queries.

Used when a caller sets ``include_synonyms``: common names, formulas and
abbreviations are expanded so a query for ``nacl`` also probes for
``sodium chloride``.

Example:
    - "h2o" expands to {"h2o", "water"}
    - "mw" expands to {"mw", "molecular weight", "molar mass"}
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence


def _group(*terms: str) -> dict[str, set[str]]:
    members = set(terms)
    return {term: members for term in terms}


# Every member of a group maps to the whole group, so lookups are bidirectional.
DEFAULT_SYNONYMS: dict[str, set[str]] = {
    # Common compounds
    **_group("water", "h2o"),
    **_group("salt", "nacl", "sodium chloride", "table salt"),
    **_group("hcl", "hydrochloric acid", "muriatic acid"),
    **_group("h2so4", "sulfuric acid", "sulphuric acid"),
    **_group("naoh", "sodium hydroxide", "caustic soda", "lye"),
    **_group("co2", "carbon dioxide"),
    **_group("nh3", "ammonia"),
    **_group("ch4", "methane"),
    **_group("ethanol", "ethyl alcohol", "c2h5oh"),
    **_group("glucose", "dextrose", "c6h12o6"),
    **_group("aspirin", "acetylsalicylic acid"),
    **_group("baking soda", "sodium bicarbonate", "nahco3"),
    # Properties
    **_group("mw", "molecular weight", "molar mass"),
    **_group("mp", "melting point"),
    **_group("bp", "boiling point"),
    **_group("en", "electronegativity"),
    # Concepts
    **_group("redox", "oxidation-reduction", "oxidation reduction"),
    **_group("ph", "acidity"),
    **_group("stoich", "stoichiometry"),
    **_group("thermo", "thermodynamics"),
    **_group("config", "configuration", "electron configuration"),
    **_group("vsepr", "molecular geometry"),
}


class SynonymExpander:
    """Expands terms to include their synonyms."""

    def __init__(self, synonyms: Mapping[str, set[str]] | None = None) -> None:
        """Initialize with synonym mappings.

        Args:
            synonyms: Custom synonym mappings. If None, uses DEFAULT_SYNONYMS.
        """
        self._synonyms = dict(synonyms) if synonyms is not None else DEFAULT_SYNONYMS

    def expand(self, term: str) -> set[str]:
        """Expand a single term to include synonyms.

        Args:
            term: The term to expand.

        Returns:
            Set containing the lower-cased term and all its synonyms.
        """
        normalized = term.lower()
        if normalized in self._synonyms:
            result = self._synonyms[normalized].copy()
            result.add(normalized)
            return result
        return {normalized}

    def alternative_probes(self, terms: Sequence[str]) -> list[str]:
        """Build extra probe strings by substituting one term at a time.

        The original probe is not included. Alternatives are returned in a
        stable order so result merging is deterministic.
        """
        probes: list[str] = []
        for index, term in enumerate(terms):
            for synonym in sorted(self.expand(term) - {term.lower()}):
                variant = [*terms[:index], synonym, *terms[index + 1 :]]
                probe = " ".join(variant)
                if probe not in probes:
                    probes.append(probe)
        return probes
