"""
Sequential testing - Wald SPRT boundaries for early stopping.

The statistic is the log-likelihood ratio of "each arm converts at its own
observed rate" against "both arms share the pooled rate", accumulated over
the conversions and non-conversions of both arms. It is signed by the
direction of the gap: positive when the variant converts better, negative
when the control does. Wald's boundaries turn it into a decision:

    upper = ln((1 - beta) / alpha)   -> test_wins
    lower = ln(beta / (1 - alpha))   -> control_wins
"""

from __future__ import annotations

import logging
import math

from scipy.stats import chi2

from shortlink.experiments.config import ExperimentConfig
from shortlink.experiments.schema import (
    SequentialDecision,
    SequentialTestResult,
    VariantResult,
)
from shortlink.stats import binomial_log_likelihood, pooled_proportion

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = ExperimentConfig()


def decision_boundaries(alpha: float, beta: float) -> tuple[float, float]:
    """Return (lower, upper) SPRT boundaries for the given error rates."""
    return math.log(beta / (1 - alpha)), math.log((1 - beta) / alpha)


def log_likelihood_ratio(control: VariantResult, variant: VariantResult) -> float:
    """Signed log-likelihood ratio of separate rates against a pooled rate."""
    x1, n1 = control.conversions, control.sessions
    x2, n2 = variant.conversions, variant.sessions
    p1, p2 = control.conversion_rate, variant.conversion_rate
    pooled = pooled_proportion(x1, n1, x2, n2)

    separate = binomial_log_likelihood(x1, n1, p1) + binomial_log_likelihood(x2, n2, p2)
    shared = binomial_log_likelihood(x1, n1, pooled) + binomial_log_likelihood(x2, n2, pooled)

    # Separate rates maximise the likelihood, so the difference is >= 0 up to rounding
    magnitude = max(separate - shared, 0.0)
    if p2 > p1:
        return magnitude
    if p2 < p1:
        return -magnitude
    return 0.0


def evaluate_sequential(
    control: VariantResult,
    variant: VariantResult,
    alpha: float | None = None,
    beta: float | None = None,
    config: ExperimentConfig | None = None,
) -> SequentialTestResult:
    """
    Decide whether a running experiment can stop early.

    Args:
        control: Control arm counters
        variant: Test arm counters
        alpha: Type I error rate (default 0.05)
        beta: Type II error rate (default 0.20)
        config: Source of the default error rates

    Returns:
        SequentialTestResult with the decision, statistic and boundaries
    """
    config = config or _DEFAULT_CONFIG
    alpha = config.sequential_alpha if alpha is None else alpha
    beta = config.sequential_beta if beta is None else beta

    if not (0 < alpha < 1 and 0 < beta < 1 and alpha + beta < 1):
        logger.warning(f"Invalid error rates alpha={alpha} beta={beta}; cannot test")
        return SequentialTestResult(
            can_stop=False,
            decision=SequentialDecision.CONTINUE,
            confidence=0.0,
            log_likelihood_ratio=0.0,
            upper_bound=0.0,
            lower_bound=0.0,
            reason="Invalid error rates",
        )

    lower, upper = decision_boundaries(alpha, beta)

    if not control.has_data or not variant.has_data:
        return SequentialTestResult(
            can_stop=False,
            decision=SequentialDecision.CONTINUE,
            confidence=0.0,
            log_likelihood_ratio=0.0,
            upper_bound=upper,
            lower_bound=lower,
            reason="Insufficient data",
        )

    llr = log_likelihood_ratio(control, variant)
    # 2 * LLR is asymptotically chi-squared with one degree of freedom
    confidence = float((1 - chi2.sf(2 * abs(llr), df=1)) * 100)

    if llr >= upper:
        decision = SequentialDecision.TEST_WINS
    elif llr <= lower:
        decision = SequentialDecision.CONTROL_WINS
    else:
        decision = SequentialDecision.CONTINUE

    logger.debug(
        f"Sequential test {variant.name!r} vs {control.name!r}: "
        f"llr={llr:.3f} bounds=({lower:.3f}, {upper:.3f}) decision={decision.value}"
    )

    return SequentialTestResult(
        can_stop=decision != SequentialDecision.CONTINUE,
        decision=decision,
        confidence=confidence,
        log_likelihood_ratio=llr,
        upper_bound=upper,
        lower_bound=lower,
        reason=_reason(decision, llr, lower, upper),
    )


def _reason(decision: SequentialDecision, llr: float, lower: float, upper: float) -> str:
    """Human-readable explanation of a sequential decision."""
    if decision == SequentialDecision.TEST_WINS:
        return f"Test variant shows significant improvement (LR: {llr:.3f} >= {upper:.3f})"
    if decision == SequentialDecision.CONTROL_WINS:
        return f"Control performs significantly better (LR: {llr:.3f} <= {lower:.3f})"
    if llr >= 0:
        progress = llr / upper * 100
        return (
            f"Continue testing - {progress:.1f}% of the way to the "
            f"test-wins boundary ({upper:.3f})"
        )
    progress = llr / lower * 100
    return (
        f"Continue testing - {progress:.1f}% of the way to the "
        f"control-wins boundary ({lower:.3f})"
    )
