"""Weighted multi-field fuzzy index.

One index is built per domain at startup and is read-only afterwards. Each
record contributes the values of its weighted search keys; list-valued keys
(such as ``tags``) contribute every element. A probe is scored against each
key with rapidfuzz's ``WRatio``, except that a value much shorter than the probe
is never scored as a fragment of it (``WRatio`` would rate a one-letter element
symbol 90 against any probe containing that letter). Identifier keys (symbols,
formulas, CAS numbers) use plain ``ratio``. Matching keys are combined the way
weighted fuzzy matchers usually do it:

    raw_score = prod(distance_k ** weight_k)   over keys that matched

so a record matching on several heavily weighted keys ends up closest to 0.
Exact key matches contribute a tiny epsilon instead of 0 to keep the other
keys meaningful. Callers convert with ``relevance = 1 - raw_score``.

Smart defaults:
- Threshold of 0.3 normalized distance (similarity >= 70%)
- Keys weights are normalized to sum to 1
- Empty probes never match; listing the catalog is the dispatcher's job
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterator, Mapping, Sequence
import logging
import sys
from typing import Generic, TypeVar

from rapidfuzz import fuzz, process
from rapidfuzz.utils import default_process


logger = logging.getLogger(__name__)

R = TypeVar("R")

DEFAULT_THRESHOLD = 0.3
EPSILON = sys.float_info.epsilon

# Length ratio at which WRatio switches to partial (fragment) scoring
PARTIAL_LENGTH_RATIO = 1.5


def field_values(record: object, key: str) -> list[str]:
    """Return the text values of ``key`` on ``record`` as a flat list."""
    value = getattr(record, key, None)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]
    return [str(value)]


def bounded_wratio(query: str, choice: str, *, score_cutoff: float | None = None, **_kwargs) -> float:
    """``WRatio`` without fragment scoring when ``choice`` is much shorter than ``query``."""
    if len(query) < PARTIAL_LENGTH_RATIO * len(choice):
        return fuzz.WRatio(query, choice, score_cutoff=score_cutoff)
    score = max(
        fuzz.ratio(query, choice),
        fuzz.token_sort_ratio(query, choice) * 0.95,
        fuzz.token_set_ratio(query, choice) * 0.95,
    )
    if score_cutoff is not None and score < score_cutoff:
        return 0.0
    return score


class FuzzyIndex(Generic[R]):
    """Approximate-match index over the weighted keys of a record collection."""

    def __init__(
        self,
        records: Sequence[R],
        keys: Mapping[str, float],
        threshold: float = DEFAULT_THRESHOLD,
        identifier_keys: Collection[str] = (),
    ) -> None:
        """Build the index.

        Args:
            records: Records to index, in catalog order.
            keys: Attribute name -> relative weight.
            threshold: Maximum normalized distance (0 = exact, 1 = anything) for a key to match.
            identifier_keys: Keys compared whole with ``fuzz.ratio``.
        """
        if not keys:
            raise ValueError("FuzzyIndex needs at least one weighted key")

        total = sum(keys.values())
        self._weights = {key: weight / total for key, weight in keys.items()}
        self._threshold = threshold
        self._scorers: dict[str, Callable[..., float]] = {
            key: fuzz.ratio if key in identifier_keys else bounded_wratio for key in self._weights
        }
        self._records: tuple[R, ...] = tuple(records)

        # Flattened, pre-processed choices per key plus the record each came from.
        self._choices: dict[str, list[str]] = {}
        self._owners: dict[str, list[int]] = {}
        for key in self._weights:
            choices: list[str] = []
            owners: list[int] = []
            for position, record in enumerate(self._records):
                for value in field_values(record, key):
                    processed = default_process(value)
                    if processed:
                        choices.append(processed)
                        owners.append(position)
            self._choices[key] = choices
            self._owners[key] = owners

        logger.debug("Built fuzzy index over %d records (keys=%s)", len(self._records), list(self._weights))

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> tuple[R, ...]:
        return self._records

    @property
    def threshold(self) -> float:
        return self._threshold

    def search(self, probe: str, *, fuzzy: bool = True) -> list[tuple[R, float]]:
        """Score every record against ``probe``.

        Args:
            probe: Free text to match.
            fuzzy: When False, a key matches only if it contains the probe verbatim
                (case-insensitive) instead of by approximate similarity.

        Returns:
            ``(record, raw_score)`` pairs, best (lowest) score first. Ties keep
            catalog order.
        """
        query = default_process(probe or "")
        if not query:
            return []

        best: dict[int, dict[str, float]] = {}
        for key in self._weights:
            matches = self._fuzzy_matches(key, query) if fuzzy else self._substring_matches(key, query)
            for owner, distance in matches:
                distances = best.setdefault(owner, {})
                if distance < distances.get(key, 1.0):
                    distances[key] = distance

        scored: list[tuple[int, float]] = []
        for owner, distances in best.items():
            score = 1.0
            for key, distance in distances.items():
                score *= max(distance, EPSILON) ** self._weights[key]
            scored.append((owner, score))

        scored.sort(key=lambda item: (item[1], item[0]))
        return [(self._records[owner], score) for owner, score in scored]

    def _fuzzy_matches(self, key: str, query: str) -> Iterator[tuple[int, float]]:
        choices = self._choices[key]
        if not choices:
            return
        cutoff = (1.0 - self._threshold) * 100.0
        owners = self._owners[key]
        for _choice, similarity, position in process.extract(
            query,
            choices,
            scorer=self._scorers[key],
            processor=None,
            score_cutoff=cutoff,
            limit=None,
        ):
            yield owners[position], 1.0 - similarity / 100.0

    def _substring_matches(self, key: str, query: str) -> Iterator[tuple[int, float]]:
        owners = self._owners[key]
        for position, choice in enumerate(self._choices[key]):
            if query in choice:
                # Share of the value not covered by the probe
                yield owners[position], 1.0 - len(query) / len(choice)
