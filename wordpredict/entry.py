#!/usr/bin/env python3
"""
A single vocabulary entry: what followed a token and what preceded it.
"""

import logging
import weakref
from decimal import Decimal
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from wordpredict.stats import (
    ZERO,
    fraction,
    mean_normalized_variance,
    standard_deviation,
)
from wordpredict.successors import SuccessorCounts
from wordpredict.tokens import Token, is_blank

if TYPE_CHECKING:
    from wordpredict.vocabulary import VocabularyModel

logger = logging.getLogger(__name__)

Context = Tuple[Token, ...]

PREVALENCE_QUANTUM = Decimal("0.00001")


class WordEntry:
    """
    One distinct token in a vocabulary.

    Holds:
        - successors: counts of the tokens observed right after this one
        - contexts: counts of the exact token sequences (from sentence start)
          that preceded this token

    Context keys are tuples, so two contexts are the same key exactly when
    they have the same tokens in the same order.

    The owning vocabulary is held through a weak reference and is only read
    (vocabulary size for ``render``).
    """

    def __init__(self, value: str, owner: Optional["VocabularyModel"] = None):
        if is_blank(value):
            raise ValueError("WordEntry value must not be blank")

        self.value = Token(value)
        self.successors = SuccessorCounts()
        self._contexts: Dict[Context, int] = {}
        self._owner = weakref.ref(owner) if owner is not None else None
        self._is_ordered = False

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def __eq__(self, other):
        if isinstance(other, WordEntry):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return NotImplemented

    def __hash__(self):
        return hash(self.value)

    def __str__(self):
        return str(self.value)

    def __repr__(self):
        return (
            f"WordEntry({str(self.value)!r}, "
            f"frequency={self.absolute_frequency}, "
            f"successors={self.distinct_successor_count})"
        )

    @property
    def owner(self) -> Optional["VocabularyModel"]:
        return self._owner() if self._owner is not None else None

    # ------------------------------------------------------------------
    # Derived counts
    # ------------------------------------------------------------------

    @property
    def distinct_successor_count(self) -> int:
        return self.successors.distinct_count

    @property
    def absolute_frequency(self) -> int:
        """Number of times this token was observed with a recorded successor."""
        return self.successors.total_count

    @property
    def contexts(self) -> Mapping[Context, int]:
        """Read-only view of context -> count."""
        return MappingProxyType(self._contexts)

    def context_count(self, tokens: Iterable[str]) -> int:
        return self._contexts.get(tuple(Token(t) for t in tokens), 0)

    @property
    def is_ordered(self) -> bool:
        return self._is_ordered

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_preceding_context(self, tokens: Iterable[str], count: int = 1) -> int:
        """
        Count one more occurrence of the exact preceding sequence ``tokens``.

        Returns:
            The new count for that sequence
        """
        if count < 1:
            raise ValueError(f"count must be a positive integer, got {count}")

        key = tuple(Token(t) for t in tokens)
        self._contexts[key] = self._contexts.get(key, 0) + count
        self._is_ordered = False
        return self._contexts[key]

    def add_successor(self, entry: "WordEntry", count: int = 1) -> int:
        """Record that ``entry`` followed this token."""
        if not isinstance(entry, WordEntry):
            raise TypeError(
                f"Successor must be a WordEntry, got {type(entry).__name__}"
            )
        self._is_ordered = False
        return self.successors.record(entry, count)

    def order_descending_by_frequency(self) -> None:
        """Rewrite successor and context order to descending count."""
        if self._is_ordered:
            return

        self.successors.reorder()
        self._contexts = dict(
            sorted(self._contexts.items(), key=lambda kv: -kv[1])
        )
        self._is_ordered = True

    # ------------------------------------------------------------------
    # Suggest
    # ------------------------------------------------------------------

    def suggest_next(self, previous_token: Optional[str] = None) -> Token:
        """
        Most likely next token.

        ``previous_token`` is accepted for the context-aware call form, but
        successors are not narrowed by it: the unconditional suggestion is
        returned.

        Raises:
            EmptyModel: If nothing ever followed this token
        """
        if previous_token is not None:
            logger.debug(
                "Context-aware suggestion for '%s' after '%s' uses unconditional ranking",
                self.value, previous_token,
            )
        return self.successors.most_likely().value

    def suggest_top_n(self, n: int, previous_token: Optional[str] = None) -> List[Token]:
        """Up to ``n`` next tokens, best first. See ``suggest_next``."""
        if previous_token is not None:
            logger.debug(
                "Context-aware top-%d for '%s' after '%s' uses unconditional ranking",
                n, self.value, previous_token,
            )
        return [entry.value for entry in self.successors.top_n(n)]

    def probability_of(self, next_token: Union["WordEntry", str]) -> Decimal:
        """P(next | this), 0 if ``next_token`` never followed."""
        if not self.successors.contains(next_token):
            return ZERO
        return fraction(self.successors.frequency_of(next_token), self.absolute_frequency)

    def frequency_fraction_of(self, next_token: Union["WordEntry", str]) -> Decimal:
        """
        Share of the owning model's corpus made up of the pair this -> next.

        0 when the pair was never seen or the entry has no owner.
        """
        owner = self.owner
        if owner is None or not self.successors.contains(next_token):
            return ZERO
        return fraction(self.successors.frequency_of(next_token), owner.total_sample_size)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def variance(self) -> Decimal:
        return mean_normalized_variance(
            (count for _, count in self.successors.items()),
            self.absolute_frequency,
            self.distinct_successor_count,
        )

    def standard_deviation(self) -> Decimal:
        return standard_deviation(self.variance())

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def render(self) -> List[str]:
        """
        Display lines for this entry.

        Example:
            ["THE"   -   3/10   (0.30000)]
        """
        owner = self.owner
        total_words = owner.unique_word_count if owner is not None else 0
        prevalence = fraction(self.absolute_frequency, total_words).quantize(PREVALENCE_QUANTUM)

        return [
            f'["{self.value.upper()}" \t - \t {self.absolute_frequency}/{total_words} \t ({prevalence})]'
        ]
