#!/usr/bin/env python3
"""
Tests for token identity and normalization.
"""

from wordpredict.tokens import END_TOKEN, START_TOKEN, Token, is_blank, normalize


class TestNormalize:
    """Tests for normalize and is_blank."""

    def test_lowercases(self):
        assert normalize("The") == "the"
        assert normalize("CAT") == "cat"

    def test_blank_becomes_empty(self):
        assert normalize("") == ""
        assert normalize("   ") == ""
        assert normalize("\t\n") == ""
        assert normalize(None) == ""

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("")
        assert is_blank("  ")
        assert not is_blank("a")


class TestToken:
    """Tests for the case-insensitive Token."""

    def test_stores_normalized_value(self):
        assert str(Token("Hello")) == "hello"

    def test_case_insensitive_equality(self):
        assert Token("The") == "the"
        assert Token("The") == "THE"
        assert Token("the") == Token("THE")
        assert not (Token("the") != "THE")
        assert Token("the") != "cat"

    def test_hash_matches_normalized_string(self):
        assert hash(Token("Cat")) == hash("cat")
        assert hash(Token("CAT")) == hash(Token("cat"))

    def test_single_dict_key_per_spelling(self):
        keys = {Token("Dog"): 1}
        keys[Token("DOG")] = 2
        assert len(keys) == 1
        assert keys["dog"] == 2

    def test_not_equal_to_non_strings(self):
        assert Token("1") != 1

    def test_sentinels(self):
        assert Token(START_TOKEN).is_sentinel
        assert Token(END_TOKEN).is_sentinel
        assert not Token("word").is_sentinel

    def test_repr(self):
        assert repr(Token("Cat")) == "Token('cat')"
