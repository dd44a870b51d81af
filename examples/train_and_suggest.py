#!/usr/bin/env python3
"""
Example: train a model on text, query it, and save/restore it.
"""

import tempfile
from pathlib import Path

from wordpredict import ModelStore, VocabularyModel

TEXT = """
The cat sat on the mat. The dog sat on the rug.
The cat ran after the dog! Did the dog run away? The dog ran away.
"""


def main():
    print("wordpredict demo")
    print("=" * 60)

    model = VocabularyModel()
    sentences = model.train_text(TEXT)
    print(f"Trained {sentences} sentences")
    print(f"Unique words: {model.unique_word_count}")
    print(f"Total sample size: {model.total_sample_size}")

    print("\nSuggestions:")
    for word in ["the", "cat", "dog", "sat", "zebra"]:
        top = model.suggest_top_n(word, 3)
        print(f"  {word:<8} -> {top if top else '(no suggestion)'}")

    print("\nNext word statistics:")
    print(f"  P(dog | the)          = {model.next_word_probability('the', 'dog')}")
    print(f"  share of 'the dog'    = {model.next_word_frequency_fraction('the', 'dog')}")
    print(f"  popularity of 'dog'   = {model.next_word_popularity('the', 'dog')}")
    print(f"  global std. deviation = {model.global_standard_deviation():.5f}")

    print("\nFrequency report:")
    print(model.render_frequency_report())

    store = ModelStore()
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "demo.xml"
        store.save(model, path, verbose=True)
        restored = store.load(path, verbose=True)
        print(f"Restored suggestion after 'the': {restored.suggest_next('the')}")


if __name__ == "__main__":
    main()
