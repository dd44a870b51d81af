"""
wordpredict: Next-Word Prediction from Bigram Frequencies

Builds successor counts and preceding contexts for every word in a training
corpus, suggests likely next words, and saves/restores the whole model.
"""

from wordpredict.tokens import Token, START_TOKEN, END_TOKEN
from wordpredict.errors import (
    WordPredictError,
    NotFound,
    EmptyModel,
    InvariantViolation,
    MalformedPersistedState,
)
from wordpredict.successors import SuccessorCounts
from wordpredict.entry import WordEntry
from wordpredict.vocabulary import VocabularyModel
from wordpredict.store import ModelStore
from wordpredict import corpus_utils

__version__ = "0.1.0"

__all__ = [
    "Token",
    "START_TOKEN",
    "END_TOKEN",
    "WordPredictError",
    "NotFound",
    "EmptyModel",
    "InvariantViolation",
    "MalformedPersistedState",
    "SuccessorCounts",
    "WordEntry",
    "VocabularyModel",
    "ModelStore",
    "corpus_utils",
]
