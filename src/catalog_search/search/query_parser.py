"""Query language parser.

Turns a raw query string into a :class:`StructuredQuery`. Supported syntax::

    "sodium chloride"        exact phrase
    acid NOT organic         exclusion
    MW:100-200               numeric range
    type:compound            field filter
    sodium OR chloride       OR group (single level)

Fragments are consumed in a fixed order (phrases, exclusions, ranges, then the
remaining whitespace tokens) so no token is matched twice. Parsing never
fails: anything that does not fit the grammar becomes a plain term.
"""

from __future__ import annotations

import logging
import re

from catalog_search.domain.search import RangeExpr, StructuredQuery


logger = logging.getLogger(__name__)

PHRASE_PATTERN = re.compile(r'"([^"]+)"')
EXCLUDE_PATTERN = re.compile(r"\bNOT\s+(\w+)", re.IGNORECASE)
RANGE_PATTERN = re.compile(r"(\w+):(\d+(?:\.\d+)?)-(\d+(?:\.\d+)?)")
FIELD_PATTERN = re.compile(r"^(\w+):(.+)$")

OR_KEYWORD = "OR"


def _strip_parens(term: str) -> str:
    return term.lstrip("()").rstrip("()")


def _clean_term(term: str) -> str:
    # Unbalanced quotes are left behind by the phrase pass.
    return _strip_parens(term.replace('"', ""))


def _is_or(token: str) -> bool:
    return token.upper() == OR_KEYWORD


def parse_query(query: str) -> StructuredQuery:
    """Parse ``query`` into its structured form.

    Args:
        query: Raw query text as typed by the user.

    Returns:
        StructuredQuery with every token assigned to exactly one bucket.
    """
    remaining = query or ""

    exact_phrases = PHRASE_PATTERN.findall(remaining)
    remaining = PHRASE_PATTERN.sub(" ", remaining)

    must_exclude = EXCLUDE_PATTERN.findall(remaining)
    remaining = EXCLUDE_PATTERN.sub(" ", remaining)

    ranges = [
        RangeExpr(field=field.lower(), min=float(low), max=float(high))
        for field, low, high in RANGE_PATTERN.findall(remaining)
    ]
    remaining = RANGE_PATTERN.sub(" ", remaining)

    tokens = remaining.split()
    must_include: list[str] = []
    field_filters: list[tuple[str, str]] = []
    or_groups: list[list[str]] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]

        if _is_or(token):
            i += 1
            continue

        field_match = FIELD_PATTERN.match(token)
        if field_match:
            field, value = field_match.groups()
            cleaned_value = _clean_term(value)
            if cleaned_value:
                field_filters.append((field.lower(), cleaned_value))
            else:
                # "type:()" has no usable value; keep it as a plain term
                must_include.append(_clean_term(token))
            i += 1
            continue

        if i + 1 < len(tokens) and _is_or(tokens[i + 1]):
            group = [_clean_term(token)]
            j = i + 2
            while j < len(tokens):
                following = tokens[j]
                if _is_or(following):
                    j += 1
                    continue
                group.append(_clean_term(following))
                if j + 1 < len(tokens) and _is_or(tokens[j + 1]):
                    j += 2
                else:
                    j += 1
                    break

            group = [term for term in group if term]
            if group:
                or_groups.append(group)
            i = j
            continue

        cleaned = _clean_term(token)
        if cleaned:
            must_include.append(cleaned)
        i += 1

    parsed = StructuredQuery(
        must_include=must_include,
        exact_phrases=exact_phrases,
        must_exclude=must_exclude,
        ranges=ranges,
        field_filters=field_filters,
        or_groups=or_groups,
    )
    logger.debug(
        "Parsed query %r: %d terms, %d phrases, %d exclusions, %d ranges, %d field filters, %d OR groups",
        query,
        len(must_include),
        len(exact_phrases),
        len(must_exclude),
        len(ranges),
        len(field_filters),
        len(or_groups),
    )
    return parsed
