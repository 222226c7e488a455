"""
Search pipeline package.

This package provides the query-time stack:
- query_parser: Query language -> StructuredQuery
- normalizer: Raw catalog entries -> records
- fuzzy: Weighted multi-field fuzzy index (rapidfuzz)
- synonyms: Optional synonym probes
- dispatcher: Fuzzy recall across domain indexes
- constraints: OR group / NOT precision pass
- filters: Field aliases and structured filters
- ranking: Sorting and pagination
- suggestions: Autocomplete
"""
