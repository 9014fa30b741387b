"""
Numeric helpers for the Q-learning agent.

Pure functions with no state: the Bellman update, a Bayesian weighted
average and a division that tolerates a zero divisor.
"""
from __future__ import annotations

import math


def bellman(
    old_value: float,
    learning_rate: float,
    reward: float,
    discount_factor: float,
    best_next_value: float,
) -> float:
    """
    One-step Q-learning update.

    See https://en.wikipedia.org/wiki/Q-learning#Algorithm

    Args:
        old_value: Current estimate for the (state, action) pair
        learning_rate: How far new information overrides the old estimate
        reward: Observed reward for the transition
        discount_factor: Importance of future rewards
        best_next_value: Best estimate available from the resulting state

    Returns:
        The refined estimate
    """
    return old_value + learning_rate * (
        reward + discount_factor * best_next_value - old_value
    )


def bayesian_average(c: float, n: float, m: float, v: float) -> float:
    """
    Blend an estimated mean with an observed value.

    Args:
        c: Prior strength. The number of observations at which the observed
           value is trusted as much as the estimate.
        n: Number of times the value has been observed
        m: Estimated value (typically a mean over siblings)
        v: Observed value

    Returns:
        (c*m + n*v) / (c + n), or 0.0 when c + n == 0
    """
    return safe_divide(c * m + n * v, c + n)


def safe_divide(dividend: float, divisor: float) -> float:
    """Divide, returning 0.0 instead of raising when divisor is zero."""
    if divisor == 0:
        return 0.0
    return dividend / divisor


def nan_to_zero(value: float) -> float:
    """Map NaN to 0.0, pass everything else through."""
    if math.isnan(value):
        return 0.0
    return value
