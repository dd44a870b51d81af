"""
Shared fixtures for wordpredict tests.
"""

import pytest

from wordpredict import VocabularyModel


@pytest.fixture
def cat_dog_model():
    """Model trained on 'the cat sat' and 'the dog ran'."""
    model = VocabularyModel()
    model.train([["the", "cat", "sat"], ["the", "dog", "ran"]])
    return model
