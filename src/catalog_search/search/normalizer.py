"""Record normalizer.

Converts raw catalog entries (camelCase mappings, as supplied by the seed
catalogs) into the frozen record models the fuzzy indexes are built from.
Derived fields such as ``tags`` are computed here once, at build time.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from catalog_search.domain.records import (
    CalculatorInput,
    CalculatorRecord,
    CompoundRecord,
    ElementRecord,
    HelpRecord,
)


# Applications attached to every element of a category.
CATEGORY_APPLICATIONS: dict[str, tuple[str, ...]] = {
    "transition-metal": ("catalyst", "industrial", "alloys"),
    "noble-gas": ("lighting", "welding", "medical"),
    "halogen": ("disinfectant", "plastics", "pharmaceutical"),
    "alkali-metal": ("batteries", "chemicals", "glass"),
}

# Applications specific to a single element symbol.
SYMBOL_APPLICATIONS: dict[str, tuple[str, ...]] = {
    "Si": ("semiconductor", "electronics", "solar"),
    "Cu": ("electronics", "wiring", "coins"),
    "Au": ("jewelry", "electronics", "investment"),
    "Ag": ("photography", "jewelry", "electronics"),
    "Fe": ("steel", "construction", "machinery"),
    "Al": ("aerospace", "packaging", "construction"),
    "C": ("organic", "fuel", "steel"),
    "O": ("life", "combustion", "medical"),
    "N": ("fertilizer", "explosives", "atmosphere"),
}


def _non_empty(values: Iterable[str | None]) -> tuple[str, ...]:
    return tuple(value for value in values if value)


def _optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _hazard_fields(hazards: Iterable[Any]) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Split raw hazards (plain strings or ``{type, ghsCode}`` objects) into types and GHS codes."""
    types: list[str] = []
    codes: list[str] = []
    for hazard in hazards:
        if isinstance(hazard, str):
            types.append(hazard)
            codes.append(hazard)
        elif isinstance(hazard, Mapping):
            types.append(hazard.get("type") or hazard.get("ghsCode") or "")
            codes.append(hazard.get("ghsCode") or "")
    return _non_empty(types), _non_empty(codes)


def normalize_compound(raw: Mapping[str, Any]) -> CompoundRecord:
    name = raw["name"]
    formula = raw["formula"]
    iupac_name = raw.get("iupacName")
    uses = tuple(raw.get("uses") or ())
    hazard_types, ghs_codes = _hazard_fields(raw.get("hazards") or ())

    solubility = raw.get("solubility")
    if isinstance(solubility, Mapping):
        solubility = solubility.get("water")

    molecular_mass = raw.get("molecularMass")
    if molecular_mass is None:
        molecular_mass = raw.get("molarMass")

    tags = _non_empty(
        [
            name.lower(),
            formula.lower(),
            (iupac_name or "").lower(),
            *(use.lower() for use in uses),
            *hazard_types,
        ]
    )

    return CompoundRecord(
        id=raw["id"],
        name=name,
        formula=formula,
        molecular_mass=_optional_float(molecular_mass),
        iupac_name=iupac_name,
        cas=raw.get("cas") or raw.get("casNumber"),
        smiles=raw.get("structure") or raw.get("smiles"),
        pka=_optional_float(raw.get("pKa")),
        pkb=_optional_float(raw.get("pKb")),
        melting_point=_optional_float(raw.get("meltingPoint")),
        boiling_point=_optional_float(raw.get("boilingPoint")),
        density=_optional_float(raw.get("density")),
        solubility=solubility,
        appearance=raw.get("appearance"),
        hazards=hazard_types,
        ghs_codes=ghs_codes,
        uses=uses,
        tags=tags,
        thai_name=raw.get("nameThai"),
    )


def element_applications(symbol: str, category: str) -> tuple[str, ...]:
    """Typical applications for an element, from its category and symbol."""
    return CATEGORY_APPLICATIONS.get(category, ()) + SYMBOL_APPLICATIONS.get(symbol, ())


def normalize_element(raw: Mapping[str, Any]) -> ElementRecord:
    name = raw["name"]
    symbol = raw["symbol"]
    category = raw["category"]
    group = raw.get("group")
    block = raw["block"]
    discoverer = raw.get("discoverer")

    tags = _non_empty(
        [
            name.lower(),
            symbol.lower(),
            category,
            f"group-{group}" if group is not None else None,
            f"period-{raw['period']}",
            f"{block}-block",
            discoverer.lower() if discoverer else None,
        ]
    )

    return ElementRecord(
        atomic_number=raw["atomicNumber"],
        symbol=symbol,
        name=name,
        atomic_mass=raw["atomicMass"],
        category=category,
        group=group,
        period=raw["period"],
        block=block,
        electron_configuration=raw.get("electronConfiguration") or "",
        electronegativity=_optional_float(raw.get("electronegativity")),
        ionization_energy=_optional_float(raw.get("ionizationEnergy")),
        melting_point=_optional_float(raw.get("meltingPoint")),
        boiling_point=_optional_float(raw.get("boilingPoint")),
        density=_optional_float(raw.get("density")),
        discovery_year=raw.get("discoveryYear"),
        discoverer=discoverer,
        applications=element_applications(symbol, category),
        tags=tags,
    )


def _slots(raw_slots: Iterable[Mapping[str, Any]]) -> tuple[CalculatorInput, ...]:
    return tuple(CalculatorInput.model_validate(slot) for slot in raw_slots)


def normalize_calculator(raw: Mapping[str, Any]) -> CalculatorRecord:
    return CalculatorRecord(
        id=raw["id"],
        name=raw["name"],
        description=raw["description"],
        category=raw["category"],
        type=raw.get("type", raw["id"]),
        formula=raw.get("formula"),
        inputs=_slots(raw.get("inputs") or ()),
        outputs=_slots(raw.get("outputs") or ()),
        examples=tuple(raw.get("examples") or ()),
        difficulty=raw.get("difficulty", "basic"),
        educational_level=tuple(raw.get("educationalLevel") or ()),
        tags=tuple(raw.get("tags") or ()),
        url=raw["url"],
    )


def normalize_help(raw: Mapping[str, Any]) -> HelpRecord:
    return HelpRecord(
        id=raw["id"],
        title=raw["title"],
        content=raw["content"],
        category=raw["category"],
        tags=tuple(raw.get("tags") or ()),
        related_topics=tuple(raw.get("relatedTopics") or ()),
        difficulty=raw.get("difficulty"),
        url=raw["url"],
    )
