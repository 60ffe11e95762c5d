"""
Proportion helpers - conversion rates, pooled variance, effect sizes.

All functions are pure and take raw counts or rates. Out-of-domain inputs
resolve to 0 instead of raising, so callers can treat "not enough data"
as a regular value.
"""

from __future__ import annotations

import math

from scipy.special import xlogy


def conversion_rate(conversions: int, sessions: int) -> float:
    """Return conversions / sessions, or 0.0 when there are no sessions."""
    if sessions <= 0:
        return 0.0
    return conversions / sessions


def pooled_proportion(
    conversions_a: int,
    sessions_a: int,
    conversions_b: int,
    sessions_b: int,
) -> float:
    """Combined conversion rate of two arms under the null hypothesis."""
    total_sessions = sessions_a + sessions_b
    if total_sessions <= 0:
        return 0.0
    return (conversions_a + conversions_b) / total_sessions


def pooled_standard_error(pooled: float, sessions_a: int, sessions_b: int) -> float:
    """Standard error of the rate difference assuming one shared rate."""
    if sessions_a <= 0 or sessions_b <= 0:
        return 0.0
    variance = pooled * (1 - pooled) * (1 / sessions_a + 1 / sessions_b)
    return math.sqrt(max(variance, 0.0))


def unpooled_standard_error(
    rate_a: float,
    sessions_a: int,
    rate_b: float,
    sessions_b: int,
) -> float:
    """Standard error of the rate difference with per-arm variances."""
    if sessions_a <= 0 or sessions_b <= 0:
        return 0.0
    variance = rate_a * (1 - rate_a) / sessions_a + rate_b * (1 - rate_b) / sessions_b
    return math.sqrt(max(variance, 0.0))


def is_open_rate(rate: float) -> bool:
    """True when rate lies strictly between 0 and 1."""
    return 0 < rate < 1


def arcsine_transform(rate: float) -> float:
    """Variance-stabilising transform 2 * asin(sqrt(p)) for p in [0, 1]."""
    if not 0 <= rate <= 1:
        raise ValueError(f"Rate must be in [0, 1], got {rate}")
    return 2 * math.asin(math.sqrt(rate))


def cohens_h(rate_a: float, rate_b: float) -> float:
    """
    Cohen's h effect size between two proportions (b minus a).

    Undefined at the 0/1 boundaries; returns 0.0 there.
    """
    if not (is_open_rate(rate_a) and is_open_rate(rate_b)):
        return 0.0
    return arcsine_transform(rate_b) - arcsine_transform(rate_a)


def binomial_log_likelihood(conversions: int, sessions: int, rate: float) -> float:
    """
    Log-likelihood of observing `conversions` out of `sessions` at `rate`.

    Uses the 0 * log(0) = 0 convention so boundary rates are well defined
    when the matching outcome count is zero.
    """
    failures = sessions - conversions
    return float(xlogy(conversions, rate) + xlogy(failures, 1 - rate))
