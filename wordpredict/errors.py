#!/usr/bin/env python3
"""
Exceptions raised by the word model.
"""


class WordPredictError(Exception):
    """Base class for all word model errors."""


class NotFound(WordPredictError, KeyError):
    """A token is not present in the vocabulary."""

    def __init__(self, token: str):
        super().__init__(token)
        self.token = token

    def __str__(self):
        return f"Token '{self.token}' not found in vocabulary"


class EmptyModel(WordPredictError, LookupError):
    """Ranking or suggestion requested on a token with no recorded successors."""


class InvariantViolation(WordPredictError, ArithmeticError):
    """An aggregate probability or frequency table does not sum to 1."""


class MalformedPersistedState(WordPredictError, ValueError):
    """A persisted model document is missing required sections or is unreadable."""
