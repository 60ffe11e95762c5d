"""
Power analysis for two-proportion tests.

Both functions return 0 when the inputs cannot produce a meaningful
answer (rates outside (0, 1), non-positive effects or sample sizes,
confidence or power outside (0, 100)).
"""

from __future__ import annotations

import logging
import math

from shortlink.experiments.config import CONFIDENCE_LEVEL, POWER
from shortlink.stats import is_open_rate, z_critical, z_power

logger = logging.getLogger(__name__)

# Target rates at or above 100% are capped so the variance term stays positive
MAX_TARGET_RATE = 0.99


def _valid_levels(confidence_level: float, power: float) -> bool:
    return 0 < confidence_level < 100 and 0 < power < 100


def recommend_sample_size(
    baseline_rate: float,
    min_relative_effect: float,
    confidence_level: float = CONFIDENCE_LEVEL,
    power: float = POWER,
) -> int:
    """
    Sessions needed per variant to detect a relative lift.

    Args:
        baseline_rate: Control conversion rate, in (0, 1)
        min_relative_effect: Smallest relative lift worth detecting (0.1 = +10%)
        confidence_level: Two-tailed confidence in percent
        power: Statistical power in percent

    Returns:
        Required sessions per variant, rounded up; 0 if not computable
    """
    if not is_open_rate(baseline_rate) or not min_relative_effect > 0:
        return 0
    if not _valid_levels(confidence_level, power):
        return 0

    p1 = baseline_rate
    p2 = p1 * (1 + min_relative_effect)
    if p2 >= 1:
        p2 = MAX_TARGET_RATE
    if p2 <= p1:
        return 0

    z_alpha = z_critical(confidence_level)
    z_beta = z_power(power)

    p_bar = (p1 + p2) / 2
    numerator = (
        z_alpha * math.sqrt(2 * p_bar * (1 - p_bar))
        + z_beta * math.sqrt(p1 * (1 - p1) + p2 * (1 - p2))
    ) ** 2
    sample_size = math.ceil(numerator / (p2 - p1) ** 2)

    logger.debug(
        f"Sample size for baseline={p1:.4f} lift={min_relative_effect:.2%}: "
        f"{sample_size} per variant"
    )
    return sample_size


def minimum_detectable_effect(
    baseline_rate: float,
    sessions: int,
    confidence_level: float = CONFIDENCE_LEVEL,
    power: float = POWER,
) -> float:
    """
    Smallest absolute rate difference detectable with `sessions` per arm.

    (z_alpha + z_beta) * sqrt(2 * p * (1 - p) / n)
    """
    if sessions <= 0 or not is_open_rate(baseline_rate):
        return 0.0
    if not _valid_levels(confidence_level, power):
        return 0.0

    standard_error = math.sqrt(2 * baseline_rate * (1 - baseline_rate) / sessions)
    return (z_critical(confidence_level) + z_power(power)) * standard_error
