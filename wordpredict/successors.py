#!/usr/bin/env python3
"""
Successor counts: how often each token followed a given token.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple, Union

from wordpredict.errors import EmptyModel
from wordpredict.stats import check_sums_to_one, fraction
from wordpredict.tokens import Token

if TYPE_CHECKING:
    from wordpredict.entry import WordEntry


class SuccessorCounts:
    """
    Mapping from successor entry to occurrence count.

    Ranking is by count descending. Ties keep first-observed order: the
    sort is stable over insertion order, and reordering (see ``reorder``)
    rewrites insertion order to the current ranking, so the tiebreak stays
    deterministic across save/load.

    Keys are ``WordEntry`` objects. Lookups also accept plain strings,
    which are normalized before hashing.
    """

    def __init__(self):
        self._counts: Dict["WordEntry", int] = {}
        self._total = 0
        self._ranked: Optional[List[Tuple["WordEntry", int]]] = None

    @staticmethod
    def _key(token: Union["WordEntry", str]):
        if isinstance(token, str):
            return Token(token)
        return token

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def record(self, entry: "WordEntry", count: int = 1) -> int:
        """
        Add ``count`` observations of ``entry`` (default one).

        Returns:
            The new count for ``entry``
        """
        if count < 1:
            raise ValueError(f"count must be a positive integer, got {count}")

        self._counts[entry] = self._counts.get(entry, 0) + count
        self._total += count
        self._ranked = None
        return self._counts[entry]

    def reorder(self) -> None:
        """Rewrite insertion order to match ``ranked_descending()``."""
        self._counts = dict(self.ranked_descending())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def distinct_count(self) -> int:
        return len(self._counts)

    @property
    def total_count(self) -> int:
        return self._total

    def contains(self, token: Union["WordEntry", str]) -> bool:
        return self._key(token) in self._counts

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._counts)

    def __iter__(self) -> Iterator["WordEntry"]:
        return iter(self._counts)

    def items(self):
        return self._counts.items()

    def frequency_of(self, token: Union["WordEntry", str]) -> int:
        """Count for ``token``, 0 if it never followed."""
        return self._counts.get(self._key(token), 0)

    def ranked_descending(self) -> List[Tuple["WordEntry", int]]:
        """
        (entry, count) pairs by count descending, ties in first-observed order.

        The ranking is cached until the next ``record``; callers get a copy.
        """
        if self._ranked is None:
            self._ranked = sorted(self._counts.items(), key=lambda kv: -kv[1])
        return list(self._ranked)

    def most_likely(self) -> "WordEntry":
        """
        Highest ranked successor.

        Raises:
            EmptyModel: If no successors were recorded
        """
        if not self._counts:
            raise EmptyModel("No successors recorded")
        return self.ranked_descending()[0][0]

    def top_n(self, n: int) -> List["WordEntry"]:
        """Up to ``n`` successors in ranking order."""
        if n <= 0:
            return []
        return [entry for entry, _ in self.ranked_descending()[:n]]

    def as_probability_map(self) -> Dict["WordEntry", Decimal]:
        """
        Successor probabilities (count / total) in ranking order.

        Raises:
            InvariantViolation: If the probabilities do not sum to 1
        """
        if not self._total:
            return {}

        probabilities = {
            entry: fraction(count, self._total)
            for entry, count in self.ranked_descending()
        }
        check_sums_to_one(probabilities.values(), "successor probabilities")
        return probabilities

    def __repr__(self):
        return f"SuccessorCounts(distinct={self.distinct_count}, total={self.total_count})"
