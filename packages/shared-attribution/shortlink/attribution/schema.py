"""
Attribution schema - touchpoints, journeys and credit records.

A journey is the set of marketing exposures (short link clicks tagged with
campaign parameters) that preceded one conversion. Storage order is never
trusted: the resolver re-establishes chronological order itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from shortlink.attribution.exceptions import InvalidModelError


class AttributionModel(str, Enum):
    """Rule for distributing conversion credit across a journey."""

    FIRST_TOUCH = "first_touch"
    LAST_TOUCH = "last_touch"
    LINEAR = "linear"  # Equal credit to all touchpoints
    TIME_DECAY = "time_decay"  # More credit to recent touchpoints
    POSITION_BASED = "position_based"  # 40% first, 40% last, 20% middle
    DATA_DRIVEN = "data_driven"  # Weighted by historical channel conversion rate

    @classmethod
    def parse(cls, value: AttributionModel | str) -> AttributionModel:
        """
        Resolve a model selector.

        Args:
            value: An AttributionModel or its string value

        Returns:
            The matching AttributionModel

        Raises:
            InvalidModelError: If the value names no known model
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidModelError(value) from e


@dataclass(frozen=True)
class Touchpoint:
    """One marketing exposure in a visitor's journey before conversion."""

    touchpoint_id: int
    session_id: str
    occurred_at: datetime
    short_code: str = ""

    # Campaign tagging (empty = direct traffic)
    campaign_source: str = ""
    campaign_medium: str = ""
    campaign_name: str = ""
    referrer: str = ""

    @property
    def is_direct(self) -> bool:
        """True when the touchpoint carries no campaign source."""
        return not self.campaign_source

    @property
    def channel(self) -> str:
        """Channel key used to group touchpoints by marketing channel."""
        if self.campaign_source:
            return f"{self.campaign_source}_{self.campaign_medium}"
        if self.referrer:
            return self.referrer
        return "direct"


@dataclass(frozen=True)
class ConversionJourney:
    """
    Touchpoints associated with one conversion.

    `touchpoints` is kept as supplied; use `chronological()` for the
    ordered view. `converted_at` is the conversion instant when the caller
    knows it.
    """

    conversion_id: str
    touchpoints: tuple[Touchpoint, ...] = ()
    converted_at: datetime | None = None

    def __post_init__(self):
        # Accept any iterable and freeze it
        object.__setattr__(self, "touchpoints", tuple(self.touchpoints))

    def chronological(self) -> list[Touchpoint]:
        """Touchpoints sorted by time, ties broken by identifier."""
        return sorted(self.touchpoints, key=lambda t: (t.occurred_at, t.touchpoint_id))

    @property
    def total_touches(self) -> int:
        return len(self.touchpoints)

    @property
    def session_id(self) -> str | None:
        """Session of the earliest touchpoint."""
        if not self.touchpoints:
            return None
        return self.chronological()[0].session_id

    @property
    def journey_minutes(self) -> int:
        """Whole minutes between the first and last touchpoint."""
        if len(self.touchpoints) < 2:
            return 0
        ordered = self.chronological()
        span = ordered[-1].occurred_at - ordered[0].occurred_at
        return int(span.total_seconds() // 60)


@dataclass(frozen=True)
class TouchpointAttribution:
    """Credit assigned to one touchpoint under one model."""

    touchpoint_id: int
    weight: float
    model: AttributionModel | None = None
    short_code: str = ""
    value: float = 0.0  # weight * conversion value, when a value is known

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the reporting collaborator."""
        return {
            "touchpoint_id": self.touchpoint_id,
            "short_code": self.short_code,
            "attribution_model": self.model.value if self.model else None,
            "weight": self.weight,
            "attribution_value": self.value,
        }


@dataclass
class AttributionReport:
    """Attribution of one conversion under several models side by side."""

    conversion_id: str
    total_value: float
    journey: ConversionJourney
    breakdown: dict[AttributionModel, list[TouchpointAttribution]] = field(default_factory=dict)
    model_comparison: dict[AttributionModel, float] = field(default_factory=dict)
    recommended_model: AttributionModel | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the reporting collaborator."""
        return {
            "conversion_id": self.conversion_id,
            "total_value": self.total_value,
            "total_touches": self.journey.total_touches,
            "journey_time_minutes": self.journey.journey_minutes,
            "attribution_breakdown": {
                model.value: [a.to_dict() for a in values]
                for model, values in self.breakdown.items()
            },
            "model_comparison": {
                model.value: total for model, total in self.model_comparison.items()
            },
            "recommended_model": self.recommended_model.value if self.recommended_model else None,
        }


@dataclass
class ChannelAttribution:
    """Credit aggregated by campaign source/medium over many journeys."""

    source: str
    medium: str
    touchpoints: int = 0
    conversions: int = 0
    attributed_conversions: float = 0.0  # Sum of weights
    attributed_value: float = 0.0
    conversion_rate: float = 0.0  # Percent of touchpoints whose journey converted

    @property
    def channel(self) -> str:
        return f"{self.source}/{self.medium}"
