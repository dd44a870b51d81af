#!/usr/bin/env python3
"""
Tests for SuccessorCounts.
"""

from decimal import Decimal, localcontext

import pytest

from wordpredict.entry import WordEntry
from wordpredict.errors import EmptyModel
from wordpredict.stats import SUM_TOLERANCE
from wordpredict.successors import SuccessorCounts


@pytest.fixture
def words():
    return {name: WordEntry(name) for name in ["cat", "dog", "sat", "ran"]}


class TestRecord:
    """Tests for recording successors."""

    def test_record_creates_and_increments(self, words):
        counts = SuccessorCounts()
        assert counts.record(words["cat"]) == 1
        assert counts.record(words["cat"]) == 2
        assert counts.frequency_of(words["cat"]) == 2
        assert counts.total_count == 2
        assert counts.distinct_count == 1

    def test_record_with_count(self, words):
        counts = SuccessorCounts()
        counts.record(words["dog"], 5)
        assert counts.frequency_of(words["dog"]) == 5
        assert counts.total_count == 5

    def test_record_rejects_non_positive(self, words):
        counts = SuccessorCounts()
        with pytest.raises(ValueError, match="positive"):
            counts.record(words["dog"], 0)

    def test_equal_entries_share_a_key(self, words):
        counts = SuccessorCounts()
        counts.record(words["cat"])
        counts.record(WordEntry("CAT"))
        assert counts.distinct_count == 1
        assert counts.frequency_of("cat") == 2


class TestQueries:
    """Tests for contains/frequency lookups."""

    def test_contains(self, words):
        counts = SuccessorCounts()
        counts.record(words["cat"])
        assert counts.contains(words["cat"])
        assert "cat" in counts
        assert "Cat" in counts
        assert "dog" not in counts

    def test_frequency_of_absent_is_zero(self, words):
        counts = SuccessorCounts()
        assert counts.frequency_of(words["cat"]) == 0
        assert counts.frequency_of("anything") == 0

    def test_len_and_iter(self, words):
        counts = SuccessorCounts()
        counts.record(words["cat"])
        counts.record(words["dog"])
        assert len(counts) == 2
        assert [str(e) for e in counts] == ["cat", "dog"]


class TestRanking:
    """Tests for ranking and suggestion."""

    def test_ranked_by_count_descending(self, words):
        counts = SuccessorCounts()
        counts.record(words["cat"])
        counts.record(words["dog"], 3)
        counts.record(words["sat"], 2)

        ranked = counts.ranked_descending()
        assert [(str(e), c) for e, c in ranked] == [("dog", 3), ("sat", 2), ("cat", 1)]

    def test_ties_keep_first_observed_order(self, words):
        counts = SuccessorCounts()
        counts.record(words["sat"])
        counts.record(words["cat"])
        counts.record(words["dog"])

        assert [str(e) for e in counts.top_n(3)] == ["sat", "cat", "dog"]

    def test_ranking_refreshes_after_record(self, words):
        counts = SuccessorCounts()
        counts.record(words["cat"])
        counts.record(words["dog"])
        assert counts.most_likely() == "cat"

        counts.record(words["dog"])
        assert counts.most_likely() == "dog"

    def test_ranking_is_a_copy(self, words):
        counts = SuccessorCounts()
        counts.record(words["cat"])
        ranked = counts.ranked_descending()
        ranked.clear()
        assert len(counts.ranked_descending()) == 1

    def test_ranking_is_repeatable(self, words):
        counts = SuccessorCounts()
        counts.record(words["cat"], 2)
        counts.record(words["dog"], 2)
        assert counts.ranked_descending() == counts.ranked_descending()

    def test_most_likely_empty_raises(self):
        with pytest.raises(EmptyModel):
            SuccessorCounts().most_likely()

    def test_top_n_bounds(self, words):
        counts = SuccessorCounts()
        counts.record(words["cat"])
        counts.record(words["dog"])

        assert counts.top_n(0) == []
        assert counts.top_n(-1) == []
        assert len(counts.top_n(1)) == 1
        assert len(counts.top_n(10)) == 2

    def test_reorder_rewrites_insertion_order(self, words):
        counts = SuccessorCounts()
        counts.record(words["cat"])
        counts.record(words["dog"], 4)
        counts.reorder()
        assert [str(e) for e in counts] == ["dog", "cat"]


class TestProbabilityMap:
    """Tests for as_probability_map."""

    def test_empty_map(self):
        assert SuccessorCounts().as_probability_map() == {}

    def test_fractions(self, words):
        counts = SuccessorCounts()
        counts.record(words["cat"], 3)
        counts.record(words["dog"])

        probs = counts.as_probability_map()
        assert probs[words["cat"]] == Decimal("0.75")
        assert probs[words["dog"]] == Decimal("0.25")

    def test_sums_to_one_with_repeating_decimals(self, words):
        counts = SuccessorCounts()
        for name in ["cat", "dog", "sat"]:
            counts.record(words[name])

        total = sum(counts.as_probability_map().values())
        assert abs(total - 1) <= SUM_TOLERANCE

    def test_sums_to_one_under_low_precision(self, words):
        counts = SuccessorCounts()
        for name in ["cat", "dog", "sat"]:
            counts.record(words[name])

        with localcontext() as ctx:
            ctx.prec = 6
            probs = counts.as_probability_map()

        assert probs[words["cat"]] == Decimal(1) / Decimal(3)
