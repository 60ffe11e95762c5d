"""Standard normal helpers used by significance and power calculations."""

from __future__ import annotations

import math

from scipy.stats import norm


def inverse_normal(p: float) -> float:
    """
    Quantile of the standard normal distribution.

    Args:
        p: Cumulative probability in the open interval (0, 1)

    Returns:
        z such that P(Z <= z) = p

    Raises:
        ValueError: If p is outside (0, 1)
    """
    if not 0 < p < 1:
        raise ValueError(f"Probability must be in (0, 1), got {p}")
    return float(norm.ppf(p))


def z_critical(confidence_level: float) -> float:
    """
    Two-tailed critical z value for a confidence level given in percent.

    95 -> 1.959964, 99 -> 2.575829.

    Raises:
        ValueError: If confidence_level is outside (0, 100)
    """
    if not 0 < confidence_level < 100:
        raise ValueError(f"Confidence level must be in (0, 100), got {confidence_level}")
    alpha = 1 - confidence_level / 100
    return inverse_normal(1 - alpha / 2)


def z_power(power: float) -> float:
    """One-tailed z value for statistical power given in percent (80 -> 0.841621)."""
    if not 0 < power < 100:
        raise ValueError(f"Power must be in (0, 100), got {power}")
    return inverse_normal(power / 100)


def two_tailed_p_value(z_score: float) -> float:
    """Probability of observing |Z| >= |z_score| under the null hypothesis."""
    if math.isnan(z_score):
        raise ValueError("z_score must be a number")
    return float(2 * norm.sf(abs(z_score)))
