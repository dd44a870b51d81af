#!/usr/bin/env python3
"""
Decimal statistics shared by word entries and the vocabulary.

Variance here is normalized by the mean, not by the number of samples:

    mean = total / n
    variance = sum((x - mean) ** 2) / mean

Saved models and reports depend on this exact normalization.

All arithmetic runs in ``DECIMAL_CONTEXT`` rather than the caller's thread
context, so results and the sum check do not change when an application
lowers ``decimal.getcontext().prec``.
"""

from decimal import Context, Decimal, localcontext
from typing import Iterable

from wordpredict.errors import InvariantViolation

ZERO = Decimal(0)
ONE = Decimal(1)

# 28 significant digits, half-even rounding
DECIMAL_CONTEXT = Context(prec=28)

# Allowed distance from 1 for a sum of fractions
SUM_TOLERANCE = Decimal("1e-20")


def fraction(part: int, whole: int) -> Decimal:
    """part / whole as a Decimal, 0 when whole is 0."""
    if not whole:
        return ZERO
    with localcontext(DECIMAL_CONTEXT):
        return Decimal(part) / Decimal(whole)


def mean_normalized_variance(values: Iterable[int], total: int, n: int) -> Decimal:
    """
    Variance of ``values`` normalized by their mean.

    Args:
        values: Sample values (counts)
        total: Sum of the values
        n: Number of values

    Returns:
        Variance, or 0 when there are no values or the mean is 0
    """
    if not n or not total:
        return ZERO

    with localcontext(DECIMAL_CONTEXT):
        mean = Decimal(total) / Decimal(n)
        squared_deviations = sum(((Decimal(v) - mean) ** 2 for v in values), ZERO)
        return squared_deviations / mean


def standard_deviation(variance: Decimal) -> Decimal:
    """Square root of a non-negative variance."""
    if variance <= ZERO:
        return ZERO
    return variance.sqrt(context=DECIMAL_CONTEXT)


def check_sums_to_one(fractions: Iterable[Decimal], what: str) -> Decimal:
    """
    Verify that a set of fractions adds up to 1.

    Raises:
        InvariantViolation: If the sum is further than SUM_TOLERANCE from 1
    """
    with localcontext(DECIMAL_CONTEXT):
        total = sum(fractions, ZERO)
        if abs(total - ONE) > SUM_TOLERANCE:
            raise InvariantViolation(
                f"The {what} should sum to 1, got {total}"
            )
    return total
