"""
Experiment summary - evaluate all arms of an experiment at once.

The control is compared with the best-performing non-control arm.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from shortlink.experiments.config import ExperimentConfig
from shortlink.experiments.exceptions import VariantNotFoundError
from shortlink.experiments.schema import (
    ExperimentSummary,
    SequentialTestResult,
    SignificanceResult,
    VariantResult,
)
from shortlink.experiments.sequential import evaluate_sequential
from shortlink.experiments.significance import evaluate_significance
from shortlink.stats import conversion_rate

logger = logging.getLogger(__name__)


def select_arms(
    variants: Sequence[VariantResult],
) -> tuple[VariantResult | None, VariantResult | None]:
    """
    Pick the control and the best non-control arm.

    Ties on conversion rate keep the earlier arm.
    """
    control = None
    best = None
    for variant in variants:
        if variant.is_control:
            if control is None:
                control = variant
        elif best is None or variant.conversion_rate > best.conversion_rate:
            best = variant
    return control, best


def summarize_experiment(
    variants: Sequence[VariantResult],
    confidence_level: float | None = None,
    config: ExperimentConfig | None = None,
) -> ExperimentSummary:
    """
    Summarize an experiment across all of its arms.

    Args:
        variants: Counters for every arm, one flagged as control
        confidence_level: Confidence in percent (default from config)
        config: Experiment defaults

    Returns:
        ExperimentSummary with totals, significance, winner and recommendation
    """
    config = config or ExperimentConfig()
    if confidence_level is None:
        confidence_level = config.confidence_level

    total_sessions = sum(v.sessions for v in variants)
    total_conversions = sum(v.conversions for v in variants)

    control, best = select_arms(variants)
    if len(variants) < 2 or control is None or best is None:
        logger.debug("Experiment needs a control and at least one variant to compare")
        significance = SignificanceResult()
    else:
        significance = evaluate_significance(control, best, confidence_level, config)

    winner = _determine_winner(variants, significance)

    return ExperimentSummary(
        variants=tuple(variants),
        total_sessions=total_sessions,
        total_conversions=total_conversions,
        overall_conversion_rate=conversion_rate(total_conversions, total_sessions),
        confidence_level=confidence_level,
        significance=significance,
        winner=winner,
        recommendation=_recommendation(significance, winner),
    )


def evaluate_experiment_sequential(
    variants: Sequence[VariantResult],
    config: ExperimentConfig | None = None,
) -> SequentialTestResult:
    """
    Run the sequential test on the control and best non-control arm.

    Raises:
        VariantNotFoundError: If there is no control or no test arm
    """
    control, best = select_arms(variants)
    if control is None or best is None:
        raise VariantNotFoundError("control or test variant not found")
    return evaluate_sequential(control, best, config=config)


def _determine_winner(
    variants: Sequence[VariantResult],
    significance: SignificanceResult,
) -> str | None:
    """Highest-converting arm, only when the difference is significant."""
    if not significance.is_significant or not variants:
        return None
    best = max(variants, key=lambda v: v.conversion_rate)
    return best.name


def _recommendation(significance: SignificanceResult, winner: str | None) -> str:
    if winner is None:
        return (
            "Continue running the test. No statistically significant winner "
            "has been determined yet."
        )
    if significance.improvement > 0:
        return (
            f"Implement {winner}. It shows a {significance.improvement:.2f}% "
            f"improvement over control with statistical significance."
        )
    return (
        f"Keep {winner}. The variant performs significantly worse than control "
        f"({significance.improvement:.2f}%)."
    )
