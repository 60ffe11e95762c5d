"""
Experiment schema - variant counters and statistical verdicts.

VariantResult snapshots come from the variant-aggregation collaborator;
the result dataclasses are handed to the reporting collaborator.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class SequentialDecision(str, Enum):
    """Outcome of an early-stopping check."""

    CONTINUE = "continue"
    TEST_WINS = "test_wins"
    CONTROL_WINS = "control_wins"


@dataclass(frozen=True)
class VariantResult:
    """
    Aggregate counters for one arm of an experiment.

    Revenue is carried through for reporting and never used in the
    statistics.

    Example:
        control = VariantResult(
            variant_id=1,
            name="Control",
            sessions=1000,
            conversions=50,
            is_control=True,
        )
    """

    variant_id: int
    name: str
    sessions: int = 0
    conversions: int = 0
    is_control: bool = False
    revenue: float = 0.0

    @property
    def conversion_rate(self) -> float:
        """Conversions per session, 0.0 without sessions."""
        if self.sessions <= 0:
            return 0.0
        return self.conversions / self.sessions

    @property
    def average_order_value(self) -> float:
        if self.conversions <= 0:
            return 0.0
        return self.revenue / self.conversions

    @property
    def is_valid(self) -> bool:
        """Counters are non-negative and conversions do not exceed sessions."""
        return 0 <= self.conversions <= self.sessions

    @property
    def has_data(self) -> bool:
        """Valid counters with at least one session."""
        return self.is_valid and self.sessions > 0


@dataclass(frozen=True)
class SignificanceResult:
    """
    Two-proportion z-test of one variant against the control.

    The all-zero default is the "not enough data" result.
    """

    is_significant: bool = False
    p_value: float = 0.0
    z_score: float = 0.0
    control_rate: float = 0.0
    variant_rate: float = 0.0
    improvement: float = 0.0  # Relative, in percent
    effect_size: float = 0.0  # Cohen's h
    confidence_interval: tuple[float, float] = (0.0, 0.0)  # For variant_rate - control_rate
    minimum_detectable_effect: float = 0.0  # Absolute rate difference
    sample_size_recommendation: int = 0  # Sessions per variant

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the reporting collaborator."""
        data = asdict(self)
        data["confidence_interval"] = list(self.confidence_interval)
        return data


@dataclass(frozen=True)
class SequentialTestResult:
    """Early-stopping verdict for a running experiment."""

    can_stop: bool
    decision: SequentialDecision
    confidence: float  # Percent
    log_likelihood_ratio: float
    upper_bound: float
    lower_bound: float
    reason: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the reporting collaborator."""
        data = asdict(self)
        data["decision"] = self.decision.value
        return data


@dataclass(frozen=True)
class ExperimentSummary:
    """Whole-experiment view over all arms."""

    variants: tuple[VariantResult, ...]
    total_sessions: int
    total_conversions: int
    overall_conversion_rate: float
    confidence_level: float
    significance: SignificanceResult
    winner: str | None = None
    recommendation: str = ""

    @property
    def is_significant(self) -> bool:
        return self.significance.is_significant


@dataclass(frozen=True)
class VariantAllocation:
    """Share of traffic routed to one variant, in whole percent."""

    variant_id: int
    name: str
    traffic_allocation: int
    is_control: bool = False
