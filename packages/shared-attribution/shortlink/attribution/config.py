"""Configuration for attribution models."""

from __future__ import annotations

import os
from dataclasses import dataclass

HALF_LIFE_HOURS = 168.0  # 7 days
POSITION_ENDPOINT_WEIGHT = 0.4
LOOKBACK_DAYS = 30
DEFAULT_CHANNEL_RATE = 0.1


@dataclass(frozen=True)
class AttributionConfig:
    """Tunable constants for the attribution models."""

    half_life_hours: float = HALF_LIFE_HOURS
    position_endpoint_weight: float = POSITION_ENDPOINT_WEIGHT  # Each of first and last
    lookback_days: int = LOOKBACK_DAYS
    default_channel_rate: float = DEFAULT_CHANNEL_RATE  # Data-driven fallback

    def __post_init__(self):
        if self.half_life_hours <= 0:
            raise ValueError(f"half_life_hours must be positive, got {self.half_life_hours}")
        if not 0 < self.position_endpoint_weight <= 0.5:
            raise ValueError(
                f"position_endpoint_weight must be in (0, 0.5], got {self.position_endpoint_weight}"
            )
        if self.lookback_days <= 0:
            raise ValueError(f"lookback_days must be positive, got {self.lookback_days}")
        if self.default_channel_rate <= 0:
            raise ValueError(
                f"default_channel_rate must be positive, got {self.default_channel_rate}"
            )

    @property
    def position_middle_weight(self) -> float:
        """Share left for the middle touchpoints of a position-based journey."""
        return 1.0 - 2 * self.position_endpoint_weight

    @classmethod
    def from_env(cls) -> AttributionConfig:
        """Build a config, applying SHORTLINK_ATTRIBUTION_* overrides."""
        return cls(
            half_life_hours=float(
                os.getenv("SHORTLINK_ATTRIBUTION_HALF_LIFE_HOURS", HALF_LIFE_HOURS)
            ),
            lookback_days=int(os.getenv("SHORTLINK_ATTRIBUTION_LOOKBACK_DAYS", LOOKBACK_DAYS)),
        )
