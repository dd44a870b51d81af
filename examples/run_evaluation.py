#!/usr/bin/env python3
"""
Example: measure next-word accuracy on held-out sentences.

Usage:
    python run_evaluation.py corpus.txt
"""

import sys

from wordpredict import VocabularyModel
from wordpredict.corpus_utils import tokenize_file
from wordpredict.evaluation import Evaluator, print_metrics, train_test_split


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    sentences = tokenize_file(sys.argv[1])
    print(f"Loaded {len(sentences):,} sentences")

    train, test = train_test_split(sentences, test_fraction=0.1, seed=42)

    model = VocabularyModel()
    model.train(train)

    metrics, _ = Evaluator(model, "Bigram").evaluate(test, top_k=10, verbose=True)
    print_metrics(metrics, "Bigram")


if __name__ == "__main__":
    main()
