"""
Shortlink Experiments - statistics for A/B tests on short links.

Provides:
- Two-proportion z-test with effect size and confidence interval
- Sample-size and minimum-detectable-effect power analysis
- Sequential (SPRT) early-stopping decisions
- Whole-experiment summaries and deterministic traffic assignment

Usage:
    from shortlink.experiments import VariantResult, evaluate_significance

    control = VariantResult(1, "Control", sessions=1000, conversions=50, is_control=True)
    variant = VariantResult(2, "Variant A", sessions=1000, conversions=80)

    result = evaluate_significance(control, variant, confidence_level=95.0)
    if result.is_significant:
        print(f"Lift: {result.improvement:.1f}%")
"""

from shortlink.experiments.config import ExperimentConfig
from shortlink.experiments.exceptions import (
    ExperimentError,
    TrafficAllocationError,
    VariantNotFoundError,
)
from shortlink.experiments.sample_size import (
    minimum_detectable_effect,
    recommend_sample_size,
)
from shortlink.experiments.schema import (
    ExperimentSummary,
    SequentialDecision,
    SequentialTestResult,
    SignificanceResult,
    VariantAllocation,
    VariantResult,
)
from shortlink.experiments.sequential import (
    decision_boundaries,
    evaluate_sequential,
    log_likelihood_ratio,
)
from shortlink.experiments.significance import evaluate_significance
from shortlink.experiments.summary import (
    evaluate_experiment_sequential,
    select_arms,
    summarize_experiment,
)
from shortlink.experiments.traffic import (
    assign_variant,
    session_bucket,
    validate_traffic_allocation,
)

__all__ = [
    # Schema
    "VariantResult",
    "SignificanceResult",
    "SequentialTestResult",
    "SequentialDecision",
    "ExperimentSummary",
    "VariantAllocation",
    # Config
    "ExperimentConfig",
    # Exceptions
    "ExperimentError",
    "VariantNotFoundError",
    "TrafficAllocationError",
    # Significance
    "evaluate_significance",
    # Power analysis
    "recommend_sample_size",
    "minimum_detectable_effect",
    # Sequential testing
    "evaluate_sequential",
    "decision_boundaries",
    "log_likelihood_ratio",
    # Experiment-level
    "summarize_experiment",
    "evaluate_experiment_sequential",
    "select_arms",
    # Traffic
    "assign_variant",
    "session_bucket",
    "validate_traffic_allocation",
]
