"""
Significance - two-proportion z-test of a variant against its control.

Uses pooled variance under the null hypothesis of equal rates for the test
statistic and unpooled variance for the confidence interval of the rate
difference. Arms without usable data produce the all-zero, non-significant
SignificanceResult instead of an error.
"""

from __future__ import annotations

import logging

from shortlink.experiments.config import ExperimentConfig
from shortlink.experiments.sample_size import minimum_detectable_effect, recommend_sample_size
from shortlink.experiments.schema import SignificanceResult, VariantResult
from shortlink.stats import (
    cohens_h,
    pooled_proportion,
    pooled_standard_error,
    two_tailed_p_value,
    unpooled_standard_error,
    z_critical,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = ExperimentConfig()


def evaluate_significance(
    control: VariantResult,
    variant: VariantResult,
    confidence_level: float | None = None,
    config: ExperimentConfig | None = None,
) -> SignificanceResult:
    """
    Compare one variant with the control.

    Args:
        control: Control arm counters
        variant: Variant arm counters
        confidence_level: Confidence in percent (default from config, 95)
        config: Power and minimum-effect settings for the sample-size fields

    Returns:
        SignificanceResult; all zeros when either arm has no usable data
        or the confidence level is outside (0, 100)
    """
    config = config or _DEFAULT_CONFIG
    if confidence_level is None:
        confidence_level = config.confidence_level

    if not 0 < confidence_level < 100:
        logger.warning(f"Confidence level {confidence_level} outside (0, 100); skipping test")
        return SignificanceResult()

    if not control.has_data or not variant.has_data:
        logger.debug(
            f"Not enough data to compare {variant.name!r} with {control.name!r} "
            f"({control.conversions}/{control.sessions} vs "
            f"{variant.conversions}/{variant.sessions})"
        )
        return SignificanceResult()

    n1, n2 = control.sessions, variant.sessions
    p1, p2 = control.conversion_rate, variant.conversion_rate

    pooled = pooled_proportion(control.conversions, n1, variant.conversions, n2)
    standard_error = pooled_standard_error(pooled, n1, n2)
    z_score = (p2 - p1) / standard_error if standard_error > 0 else 0.0
    p_value = two_tailed_p_value(z_score)

    z_crit = z_critical(confidence_level)
    is_significant = abs(z_score) >= z_crit

    improvement = (p2 - p1) / p1 * 100 if p1 > 0 else 0.0

    diff = p2 - p1
    margin = z_crit * unpooled_standard_error(p1, n1, p2, n2)

    result = SignificanceResult(
        is_significant=is_significant,
        p_value=p_value,
        z_score=z_score,
        control_rate=p1,
        variant_rate=p2,
        improvement=improvement,
        effect_size=cohens_h(p1, p2),
        confidence_interval=(diff - margin, diff + margin),
        minimum_detectable_effect=minimum_detectable_effect(
            p1, n1, confidence_level, config.power
        ),
        sample_size_recommendation=recommend_sample_size(
            p1, config.minimum_relative_effect, confidence_level, config.power
        ),
    )

    logger.debug(
        f"{variant.name!r} vs {control.name!r}: z={z_score:.3f} p={p_value:.4f} "
        f"significant={is_significant}"
    )
    return result
