#!/usr/bin/env python3
"""
Evaluation framework for VocabularyModel.

Measures next-word prediction on held-out sentences: every step of a
sentence (start sentinel -> first word -> ... -> last word -> end sentinel)
is one prediction.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
import time

import numpy as np

from wordpredict.tokens import END_TOKEN, START_TOKEN, Token, is_blank
from wordpredict.vocabulary import VocabularyModel


@dataclass
class PredictionResult:
    """Outcome of suggesting the word after ``current``."""
    current: str
    true_next: str
    predicted: Optional[str]  # Best suggestion, None when nothing was suggested
    probability: float  # Model's P(true_next | current)
    rank: int  # 1-based position of true_next in the suggestions, top_k + 1 if absent
    correct: bool
    time_ms: float


@dataclass
class EvaluationMetrics:
    """Summary over every step of the held-out sentences."""
    num_samples: int  # Steps, including the step into the end sentinel
    num_correct: int
    num_covered: int

    # How often the best suggestion, or one of the best k, was the next word
    accuracy: float
    top_k_accuracy: Dict[int, float]
    mean_rank: float
    median_rank: float

    # Share of steps whose current word had suggestions at all
    coverage: float
    no_match_rate: float

    # Only steps where the pair was seen in training contribute
    perplexity: float
    mean_probability: float

    mean_time_ms: float
    median_time_ms: float
    total_time_s: float


def sentence_steps(sentence: Sequence[str]) -> List[Tuple[str, str]]:
    """
    (current, next) pairs for a sentence, framed by the sentinels.

    Example:
        >>> sentence_steps(["the", "cat"])
        [('{{start}}', 'the'), ('the', 'cat'), ('cat', '{{end}}')]
    """
    words = [
        str(Token(word))
        for token in sentence if not is_blank(token)
        for word in token.split()
    ]
    if not words:
        return []
    framed = [START_TOKEN] + words + [END_TOKEN]
    return list(zip(framed, framed[1:]))


def train_test_split(
    sentences: Sequence[Sequence[str]],
    test_fraction: float = 0.1,
    seed: Optional[int] = None
) -> Tuple[List[Sequence[str]], List[Sequence[str]]]:
    """
    Shuffle sentences and split them into (train, test).

    Raises:
        ValueError: If test_fraction is not in [0, 1]
    """
    if not 0.0 <= test_fraction <= 1.0:
        raise ValueError(f"test_fraction must be between 0 and 1, got {test_fraction}")

    rng = np.random.default_rng(seed)
    order = rng.permutation(len(sentences))
    num_test = int(round(len(sentences) * test_fraction))

    test = [sentences[i] for i in order[:num_test]]
    train = [sentences[i] for i in order[num_test:]]
    return train, test


class Evaluator:
    """Evaluate a VocabularyModel on held-out sentences."""

    def __init__(self, model: VocabularyModel, model_name: str = "Unknown"):
        """
        Initialize evaluator.

        Args:
            model: Trained VocabularyModel
            model_name: Name for reporting
        """
        self.model = model
        self.model_name = model_name

    def evaluate(
        self,
        sentences: Sequence[Sequence[str]],
        top_k: int = 10,
        verbose: bool = False
    ) -> Tuple[EvaluationMetrics, List[PredictionResult]]:
        """
        Evaluate the model on held-out sentences.

        Args:
            sentences: Sentences of tokens
            top_k: Number of suggestions to consider per step
            verbose: Print progress

        Returns:
            (metrics, detailed_results)
        """
        steps = [step for sentence in sentences for step in sentence_steps(sentence)]
        results = []
        start_time = time.time()

        for i, (current, true_next) in enumerate(steps):
            if verbose and i % 1000 == 0:
                print(f"Evaluating {i}/{len(steps)}...")

            pred_start = time.time()
            predictions = self.model.suggest_top_n(current, top_k)
            pred_time = (time.time() - pred_start) * 1000  # ms

            if predictions:
                rank = top_k + 1
                if true_next in predictions:
                    rank = predictions.index(true_next) + 1
                predicted = predictions[0]
                correct = predicted == true_next
            else:
                predicted = None
                rank = top_k + 1
                correct = False

            probability = float(self.model.next_word_probability(current, true_next))

            results.append(PredictionResult(
                current=current,
                true_next=true_next,
                predicted=predicted,
                probability=probability,
                rank=rank,
                correct=correct,
                time_ms=pred_time
            ))

        total_time = time.time() - start_time
        metrics = self._compute_metrics(results, top_k, total_time)
        return metrics, results

    def _compute_metrics(
        self,
        results: List[PredictionResult],
        top_k: int,
        total_time: float
    ) -> EvaluationMetrics:
        """Compute aggregated metrics from results."""
        n = len(results)
        if n == 0:
            return EvaluationMetrics(
                accuracy=0.0, top_k_accuracy={}, mean_rank=0.0, median_rank=0.0,
                coverage=0.0, no_match_rate=1.0, perplexity=float('inf'),
                mean_probability=0.0, mean_time_ms=0.0, median_time_ms=0.0,
                total_time_s=total_time, num_samples=0, num_correct=0, num_covered=0
            )

        ranks = np.array([r.rank for r in results], dtype=float)
        correct = np.array([r.correct for r in results], dtype=bool)
        covered = np.array([r.predicted is not None for r in results], dtype=bool)
        times = np.array([r.time_ms for r in results], dtype=float)
        probs = np.array([r.probability for r in results if r.probability > 0], dtype=float)

        top_k_acc = {
            k: float(np.mean(ranks <= k))
            for k in (1, 3, 5, 10)
            if k <= top_k
        }

        if probs.size:
            perplexity = float(np.exp(-np.mean(np.log(probs))))
            mean_probability = float(np.mean(probs))
        else:
            perplexity = float('inf')
            mean_probability = 0.0

        coverage = float(np.mean(covered))

        return EvaluationMetrics(
            accuracy=float(np.mean(correct)),
            top_k_accuracy=top_k_acc,
            mean_rank=float(np.mean(ranks)),
            median_rank=float(np.median(ranks)),
            coverage=coverage,
            no_match_rate=1.0 - coverage,
            perplexity=perplexity,
            mean_probability=mean_probability,
            mean_time_ms=float(np.mean(times)),
            median_time_ms=float(np.median(times)),
            total_time_s=total_time,
            num_samples=n,
            num_correct=int(correct.sum()),
            num_covered=int(covered.sum())
        )


def print_metrics(metrics: EvaluationMetrics, model_name: str = "Model"):
    """Print a formatted summary of one evaluation."""
    print("\n" + "=" * 60)
    print(f"{model_name}")
    print("=" * 60)
    print(f"{'Samples':<20} {metrics.num_samples}")
    print(f"{'Accuracy':<20} {metrics.accuracy:.3f}")
    for k, acc in metrics.top_k_accuracy.items():
        print(f"{f'Top-{k}':<20} {acc:.3f}")
    print(f"{'Coverage':<20} {metrics.coverage:.3f}")
    print(f"{'Mean rank':<20} {metrics.mean_rank:.2f}")
    print(f"{'Perplexity':<20} {metrics.perplexity:.2f}")
    print(f"{'Mean time (ms)':<20} {metrics.mean_time_ms:.3f}")
    print("=" * 60)
