"""Structured filters and the query-syntax field alias table.

Query fragments such as ``MW:100-200`` or ``type:element`` are folded into the
caller's :class:`SearchFilters` through one central alias table, then every
candidate is checked against all filter dimensions (AND semantics).

A numeric range only constrains records that carry the attribute. With the
default ``"pass"`` policy a record missing the attribute passes the range;
``"fail"`` makes such records fail instead.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Literal

from catalog_search.domain.records import CalculatorRecord, CompoundRecord, ElementRecord
from catalog_search.domain.search import NumericRange, SearchFilters, SearchResult, StructuredQuery


logger = logging.getLogger(__name__)

MissingAttributePolicy = Literal["pass", "fail"]

# Query range field (lower-cased) -> SearchFilters range attribute.
RANGE_ALIASES: dict[str, str] = {
    "mw": "molecular_weight_range",
    "molecularweight": "molecular_weight_range",
    "molarmass": "molecular_weight_range",
    "mp": "melting_point_range",
    "meltingpoint": "melting_point_range",
    "bp": "boiling_point_range",
    "boilingpoint": "boiling_point_range",
    "an": "atomic_number_range",
    "atomicnumber": "atomic_number_range",
    "z": "atomic_number_range",
    "pka": "pka_range",
    "pkb": "pkb_range",
}

# Query field filter (lower-cased) -> SearchFilters list attribute.
FIELD_ALIASES: dict[str, str] = {
    "type": "type",
    "category": "category",
    "difficulty": "difficulty",
    "group": "group",
    "period": "period",
    "block": "block",
    "safety": "safety",
    "hazard": "safety",
    "ghs": "ghs_codes",
}

INTEGER_FIELDS = frozenset({"group", "period"})

# Range attribute -> record attribute it constrains.
RANGE_ATTRIBUTES: dict[str, str] = {
    "molecular_weight_range": "molecular_mass",
    "melting_point_range": "melting_point",
    "boiling_point_range": "boiling_point",
    "atomic_number_range": "atomic_number",
    "pka_range": "pka",
    "pkb_range": "pkb",
}


def _coerce_field_value(attribute: str, value: str) -> str | int | None:
    if attribute in INTEGER_FIELDS:
        try:
            return int(value)
        except ValueError:
            return None
    if attribute == "ghs_codes":
        return value.upper()
    return value.lower()


def merge_query_filters(parsed: StructuredQuery, filters: SearchFilters | None = None) -> SearchFilters:
    """Fold query-derived ranges and field filters into ``filters``.

    Query ranges replace a structured range for the same attribute; field
    filter values are appended to the matching list without duplicates.
    Unknown fields are ignored.

    Returns:
        A new SearchFilters; ``filters`` is left untouched.
    """
    effective = (filters or SearchFilters()).model_copy(deep=True)

    for expr in parsed.ranges:
        attribute = RANGE_ALIASES.get(expr.field.lower())
        if attribute is None:
            logger.debug("Ignoring range on unknown field %r", expr.field)
            continue
        setattr(effective, attribute, NumericRange(min=expr.min, max=expr.max))

    for field, raw_value in parsed.field_filters:
        attribute = FIELD_ALIASES.get(field.lower())
        if attribute is None:
            logger.debug("Ignoring filter on unknown field %r", field)
            continue
        value = _coerce_field_value(attribute, raw_value)
        if value is None:
            logger.debug("Ignoring non-numeric %s filter value %r", field, raw_value)
            continue
        existing = list(getattr(effective, attribute) or [])
        if value not in existing:
            existing.append(value)
        setattr(effective, attribute, existing)

    return effective


class FilterEvaluator:
    """Applies :class:`SearchFilters` to candidate results."""

    def __init__(self, missing_attribute_policy: MissingAttributePolicy = "pass") -> None:
        self._missing_passes = missing_attribute_policy == "pass"

    def apply(self, results: Sequence[SearchResult], filters: SearchFilters) -> list[SearchResult]:
        return [result for result in results if self.matches(result, filters)]

    def matches(self, result: SearchResult, filters: SearchFilters) -> bool:
        if filters.type is not None:
            wanted = {value.lower() for value in filters.type}
            if result.domain_type.value not in wanted:
                return False

        if filters.category is not None and not self._category_matches(result, filters.category):
            return False

        if not self._ranges_match(result, filters):
            return False

        record = result.raw_record
        if isinstance(record, CompoundRecord):
            return self._compound_matches(record, filters)
        if isinstance(record, ElementRecord):
            return self._element_matches(record, filters)
        if isinstance(record, CalculatorRecord):
            return self._calculator_matches(record, filters)
        return True

    def _category_matches(self, result: SearchResult, categories: Sequence[str]) -> bool:
        # Containment against the display category or the record's own category
        targets = [result.category.lower(), result.raw_record.category.lower()]
        return any(category.lower() in target for category in categories for target in targets)

    def _ranges_match(self, result: SearchResult, filters: SearchFilters) -> bool:
        for range_attribute, record_attribute in RANGE_ATTRIBUTES.items():
            bounds: NumericRange | None = getattr(filters, range_attribute)
            if bounds is None:
                continue
            if not hasattr(result.raw_record, record_attribute):
                # Attribute not defined for this domain
                continue
            value = getattr(result.raw_record, record_attribute)
            if value is None:
                if self._missing_passes:
                    continue
                return False
            if not bounds.contains(value):
                return False
        return True

    def _compound_matches(self, record: CompoundRecord, filters: SearchFilters) -> bool:
        if filters.safety is not None and record.hazards:
            hazards = {hazard.lower() for hazard in record.hazards}
            if not any(level.lower() in hazards for level in filters.safety):
                return False

        if filters.ghs_codes is not None and record.ghs_codes:
            codes = {code.upper() for code in record.ghs_codes}
            if not any(code.upper() in codes for code in filters.ghs_codes):
                return False

        if filters.applications is not None and record.uses:
            uses = [use.lower() for use in record.uses]
            if not any(app.lower() in use for app in filters.applications for use in uses):
                return False

        return True

    def _element_matches(self, record: ElementRecord, filters: SearchFilters) -> bool:
        if filters.group is not None and record.group is not None and record.group not in filters.group:
            return False
        if filters.period is not None and record.period not in filters.period:
            return False
        if filters.block is not None and record.block.lower() not in {block.lower() for block in filters.block}:
            return False
        if filters.element_category is not None and record.category not in filters.element_category:
            return False
        return True

    def _calculator_matches(self, record: CalculatorRecord, filters: SearchFilters) -> bool:
        if filters.difficulty is not None:
            return record.difficulty in {level.lower() for level in filters.difficulty}
        return True
