#!/usr/bin/env python3
"""
VocabularyModel: bigram successor counts and preceding contexts for every
token seen in training.

Usage:
    >>> model = VocabularyModel()
    >>> model.train([["the", "cat", "sat"], ["the", "dog", "ran"]])
    >>> model.suggest_top_n("the", 2)
    ['cat', 'dog']
    >>> model.next_word_probability("the", "cat")
    Decimal('0.5')
"""

import time
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Union

from wordpredict.corpus_utils import load_text_file, tokenize_text
from wordpredict.entry import WordEntry
from wordpredict.errors import EmptyModel, NotFound
from wordpredict.stats import (
    ZERO,
    check_sums_to_one,
    fraction,
    mean_normalized_variance,
    standard_deviation,
)
from wordpredict.tokens import END_TOKEN, START_TOKEN, Token, is_blank

Sentence = Sequence[str]
Tokenizer = Callable[[str], List[List[str]]]


class VocabularyModel:
    """
    Owns one ``WordEntry`` per distinct token.

    Training walks each sentence from the start sentinel to the end sentinel.
    For every step ``previous -> word`` the entry for ``previous`` gets
    ``word`` as a successor and the tokens before ``previous`` as a context.
    Entries are created on first observation and never removed; every entry
    referenced by a successor is itself a key of this model.

    Ordering by descending frequency is applied on demand and remembered
    until the next mutation (``is_ordered``).
    """

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        """
        Initialize an empty model.

        Args:
            tokenizer: Callable turning raw text into sentences of tokens,
                used by ``train_text`` and ``train_file``. Defaults to
                ``corpus_utils.tokenize_text``.
        """
        self._entries: Dict[Token, WordEntry] = {}
        self._ordered = False
        self._tokenizer = tokenizer

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[WordEntry]:
        return iter(self._entries.values())

    def __contains__(self, token) -> bool:
        return self.contains(token)

    def __repr__(self):
        return (
            f"VocabularyModel(unique_words={self.unique_word_count}, "
            f"total_sample_size={self.total_sample_size})"
        )

    @property
    def entries(self) -> List[WordEntry]:
        """Entries in current dictionary order."""
        return list(self._entries.values())

    @property
    def unique_word_count(self) -> int:
        return len(self._entries)

    @property
    def total_sample_size(self) -> int:
        """Sum of every entry's absolute frequency."""
        return sum(entry.absolute_frequency for entry in self._entries.values())

    # ------------------------------------------------------------------
    # Entry management
    # ------------------------------------------------------------------

    def _entry_for(self, token: str) -> WordEntry:
        """Get or create the entry for ``token``. Blank text maps to the end sentinel."""
        key = Token(token)
        if not key:
            key = Token(END_TOKEN)

        entry = self._entries.get(key)
        if entry is None:
            entry = WordEntry(key, owner=self)
            self._entries[key] = entry
            self._ordered = False
        return entry

    def add_entry(self, token: str) -> WordEntry:
        """Create (if needed) and return the entry for ``token``."""
        return self._entry_for(token)

    def _link(self, context: Sequence[str], current: str, following: str) -> None:
        current_entry = self._entry_for(current)
        following_entry = self._entry_for(following)
        current_entry.add_preceding_context(context)
        current_entry.add_successor(following_entry)

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train_sentence(self, sentence: Sentence) -> None:
        """
        Train on one sentence of tokens.

        Tokens containing whitespace are split into separate words and
        blank tokens are dropped before walking; a sentence with no
        remaining tokens is ignored.

        Raises:
            TypeError: If ``sentence`` is a single string instead of a
                sequence of tokens
        """
        if isinstance(sentence, str):
            raise TypeError(
                f"Expected a sequence of tokens, got the string {sentence!r}"
            )
        if not sentence:
            return

        words = [
            Token(word)
            for token in sentence if not is_blank(token)
            for word in token.split()
        ]
        if not words:
            return

        self._ordered = False

        context: List[Token] = []
        previous = Token(START_TOKEN)
        for word in words:
            self._link(context, previous, word)
            context.append(previous)
            previous = word

        self._link(context, previous, END_TOKEN)

    def train(self, sentences: Iterable[Sentence]) -> None:
        """Train on a sequence of sentences, each a sequence of tokens."""
        for sentence in sentences:
            self.train_sentence(sentence)

    def _tokenize(self, text: str) -> List[List[str]]:
        if self._tokenizer is not None:
            return self._tokenizer(text)

        return tokenize_text(text)

    def train_text(self, text: str) -> int:
        """
        Tokenize raw text and train on it.

        Returns:
            Number of sentences trained
        """
        sentences = self._tokenize(text)
        self.train(sentences)
        return len(sentences)

    def train_file(
        self,
        path: Union[str, Path],
        encoding: str = 'utf-8',
        verbose: bool = False
    ) -> int:
        """
        Tokenize a text file and train on it.

        Args:
            path: Text file to read
            encoding: File encoding
            verbose: Print progress messages

        Returns:
            Number of sentences trained

        Raises:
            FileNotFoundError: If ``path`` does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Cannot train on missing file: {path}")

        start = time.time()
        if verbose:
            print(f"Training on {path}...")

        count = self.train_text(load_text_file(path, encoding=encoding))

        if verbose:
            elapsed = time.time() - start
            print(
                f"Trained {count:,} sentences in {elapsed:.2f}s "
                f"({self.unique_word_count:,} unique words)"
            )
        return count

    # ------------------------------------------------------------------
    # Find
    # ------------------------------------------------------------------

    def contains(self, token) -> bool:
        if isinstance(token, WordEntry):
            token = token.value
        if not isinstance(token, str):
            return False
        return Token(token) in self._entries

    def get(self, token: str) -> Optional[WordEntry]:
        """Entry for ``token`` or None."""
        if not isinstance(token, str):
            return None
        return self._entries.get(Token(token))

    def find(self, token: str) -> WordEntry:
        """
        Entry for ``token``.

        Raises:
            NotFound: If ``token`` is not in the vocabulary
        """
        entry = self.get(token)
        if entry is None:
            raise NotFound(token)
        return entry

    # ------------------------------------------------------------------
    # Suggest
    # ------------------------------------------------------------------

    def suggest_next(self, token: str, previous_token: Optional[str] = None) -> str:
        """
        Most likely token to follow ``token``.

        Returns "" when ``token`` is unknown or has no successors.
        """
        entry = self.get(token)
        if entry is None:
            return ""
        try:
            return str(entry.suggest_next(previous_token))
        except EmptyModel:
            return ""

    def suggest_top_n(
        self,
        token: str,
        n: int,
        previous_token: Optional[str] = None
    ) -> List[str]:
        """Up to ``n`` likely next tokens, best first; [] when ``token`` is unknown."""
        entry = self.get(token)
        if entry is None:
            return []
        return [str(token) for token in entry.suggest_top_n(n, previous_token)]

    # ------------------------------------------------------------------
    # Next word statistics
    # ------------------------------------------------------------------

    def _pair(self, current: str, following: str):
        current_entry = self.get(current)
        following_entry = self.get(following)
        if current_entry is None or following_entry is None:
            return None
        return current_entry, following_entry

    def next_word_probability(self, current: str, following: str) -> Decimal:
        """P(following | current); 0 if either token is unknown."""
        pair = self._pair(current, following)
        if pair is None:
            return ZERO
        current_entry, following_entry = pair
        return current_entry.probability_of(following_entry)

    def next_word_frequency_fraction(self, current: str, following: str) -> Decimal:
        """Share of the whole corpus made up of the pair current -> following."""
        pair = self._pair(current, following)
        if pair is None:
            return ZERO
        current_entry, following_entry = pair
        return current_entry.frequency_fraction_of(following_entry)

    def next_word_popularity(self, current: str, following: str) -> Decimal:
        """
        Corpus share of ``following`` on its own.

        Not conditioned on ``current``; ``current`` only has to be known.
        """
        pair = self._pair(current, following)
        if pair is None:
            return ZERO
        _, following_entry = pair
        total = self.total_sample_size
        if not total:
            return ZERO
        return Decimal(following_entry.absolute_frequency) * (Decimal(1) / Decimal(total))

    # ------------------------------------------------------------------
    # Order
    # ------------------------------------------------------------------

    @property
    def is_ordered(self) -> bool:
        return self._ordered and all(entry.is_ordered for entry in self._entries.values())

    def _ranked_entries(self) -> List[WordEntry]:
        # Stable: equal frequencies keep dictionary order
        return sorted(self._entries.values(), key=lambda entry: -entry.absolute_frequency)

    def order_descending_by_frequency(self) -> None:
        """
        Reorder the dictionary and every entry by descending frequency.

        Does nothing if the model is already ordered.
        """
        if self.is_ordered:
            return

        self._entries = {entry.value: entry for entry in self._ranked_entries()}
        for entry in self._entries.values():
            entry.order_descending_by_frequency()
        self._ordered = True

    def sorted_words(self) -> List[str]:
        """Tokens by descending absolute frequency."""
        self.order_descending_by_frequency()
        return [str(entry.value) for entry in self._entries.values()]

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def variance(self, token: str) -> Decimal:
        entry = self.get(token)
        return entry.variance() if entry is not None else ZERO

    def standard_deviation(self, token: str) -> Decimal:
        entry = self.get(token)
        return entry.standard_deviation() if entry is not None else ZERO

    def global_variance(self) -> Decimal:
        """Mean-normalized variance of absolute frequencies over all entries."""
        return mean_normalized_variance(
            (entry.absolute_frequency for entry in self._entries.values()),
            self.total_sample_size,
            self.unique_word_count,
        )

    def global_standard_deviation(self) -> Decimal:
        return standard_deviation(self.global_variance())

    def corpus_frequency_table(self) -> Dict[WordEntry, Decimal]:
        """
        Each entry's share of the total sample size, by descending frequency.

        Raises:
            InvariantViolation: If the shares do not sum to 1
        """
        total = self.total_sample_size
        if not total:
            return {}

        table = {
            entry: fraction(entry.absolute_frequency, total)
            for entry in self._ranked_entries()
        }
        check_sums_to_one(table.values(), "corpus frequencies")
        return table

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    @staticmethod
    def _format_percentage(value: Decimal) -> str:
        # Nine decimals with no leading zero before the point: ".500000000"
        text = f"{value:.9f}"
        if text.startswith("0."):
            return text[1:]
        return text

    def render_frequency_report(self) -> str:
        """
        CSV report of corpus frequencies.

        Example:
            WORD,FREQUENCY
            50.000000000,     the
            25.000000000,     cat
        """
        table = self.corpus_frequency_table()

        lines = ["WORD,FREQUENCY"]
        lines.extend(
            f"{self._format_percentage(share * 100)},{str(entry.value):>8}"
            for entry, share in table.items()
        )
        return "\n".join(lines) + "\n"

    def render_dictionary(self) -> List[str]:
        """Display lines for every entry, most frequent first."""
        self.order_descending_by_frequency()
        lines = []
        for entry in self._entries.values():
            lines.extend(entry.render())
        return lines
