#!/usr/bin/env python3
"""
Tests for corpus_utils module (default tokenizer).
"""

import json

import pytest

from wordpredict.corpus_utils import (
    iter_jsonl,
    load_text_file,
    normalize_text,
    tokenize_documents,
    tokenize_file,
    tokenize_text,
)


class TestNormalizeText:
    """Tests for text canonicalization."""

    def test_lowercases(self):
        assert normalize_text("Hello World") == "hello world"

    def test_sentence_breaks(self):
        assert normalize_text("Why? Because!") == "why. because."

    def test_punctuation_becomes_space(self):
        assert normalize_text("a,b;c:d-e") == "a b c d e"
        assert normalize_text("(x) [y] {z}") == "x y z"

    def test_quotes(self):
        assert normalize_text('He said "hi"') == "he said hi"

    def test_apostrophes_dropped(self):
        assert normalize_text("the dog's bone") == "the dogs bone"

    def test_ordinals(self):
        assert normalize_text("the 3rd day") == "the third day"
        assert normalize_text("11th hour") == "eleventh hour"

    def test_digits(self):
        assert normalize_text("I have 2 cats") == "i have two cats"
        assert normalize_text("100%") == "one zero zero"

    def test_contractions(self):
        assert normalize_text("I can't go") == "i cannot go"
        assert normalize_text("They're here") == "they are here"
        assert normalize_text("I'm done") == "i am done"

    def test_contractions_only_whole_words(self):
        assert normalize_text("It is time") == "it is time"
        assert normalize_text("They were here") == "they were here"

    def test_whitespace_collapsed(self):
        assert normalize_text("  a \t\n  b  ") == "a b"

    def test_unicode_letters_kept(self):
        assert normalize_text("Café au lait") == "café au lait"


class TestTokenize:
    """Tests for sentence/word splitting."""

    def test_tokenize_text(self):
        assert tokenize_text("The cat sat. The dog ran!") == [
            ["the", "cat", "sat"],
            ["the", "dog", "ran"],
        ]

    def test_empty_sentences_dropped(self):
        assert tokenize_text("...Hello... world.") == [["hello"], ["world"]]
        assert tokenize_text("") == []
        assert tokenize_text("?!.") == []

    def test_no_blank_tokens(self):
        for sentence in tokenize_text("a  ,  b . c -- d"):
            assert all(word.strip() for word in sentence)

    def test_tokenize_documents(self):
        assert tokenize_documents(["One. Two.", "Three"]) == [["one"], ["two"], ["three"]]


class TestFiles:
    """Tests for file helpers."""

    def test_load_text_file(self, tmp_path):
        path = tmp_path / "test.txt"
        path.write_text("Hello, world!", encoding="utf-8")
        assert load_text_file(path) == "Hello, world!"

    def test_tokenize_file(self, tmp_path):
        path = tmp_path / "corpus.txt"
        path.write_text("The cat sat.\nThe dog ran.\n", encoding="utf-8")
        assert tokenize_file(path) == [["the", "cat", "sat"], ["the", "dog", "ran"]]

    def test_tokenize_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            tokenize_file(tmp_path / "missing.txt")

    def test_iter_jsonl(self, tmp_path):
        path = tmp_path / "docs.jsonl"
        with open(path, "w", encoding="utf-8") as f:
            f.write(json.dumps({"text": "first"}) + "\n")
            f.write("\n")
            f.write(json.dumps({"other": "skipped"}) + "\n")
            f.write(json.dumps({"text": "second"}) + "\n")

        assert list(iter_jsonl(path)) == ["first", "second"]
