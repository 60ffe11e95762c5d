"""Configuration for experiment evaluation."""

from __future__ import annotations

import os
from dataclasses import dataclass

CONFIDENCE_LEVEL = 95.0  # Percent
POWER = 80.0  # Percent
MINIMUM_RELATIVE_EFFECT = 0.05  # 5% relative lift
SEQUENTIAL_ALPHA = 0.05  # Type I error
SEQUENTIAL_BETA = 0.20  # Type II error


@dataclass(frozen=True)
class ExperimentConfig:
    """Defaults for significance, power analysis and sequential testing."""

    confidence_level: float = CONFIDENCE_LEVEL
    power: float = POWER
    minimum_relative_effect: float = MINIMUM_RELATIVE_EFFECT
    sequential_alpha: float = SEQUENTIAL_ALPHA
    sequential_beta: float = SEQUENTIAL_BETA

    def __post_init__(self):
        if not 0 < self.confidence_level < 100:
            raise ValueError(f"confidence_level must be in (0, 100), got {self.confidence_level}")
        if not 0 < self.power < 100:
            raise ValueError(f"power must be in (0, 100), got {self.power}")
        if self.minimum_relative_effect <= 0:
            raise ValueError(
                f"minimum_relative_effect must be positive, got {self.minimum_relative_effect}"
            )
        if not 0 < self.sequential_alpha < 1:
            raise ValueError(f"sequential_alpha must be in (0, 1), got {self.sequential_alpha}")
        if not 0 < self.sequential_beta < 1:
            raise ValueError(f"sequential_beta must be in (0, 1), got {self.sequential_beta}")

    @classmethod
    def from_env(cls) -> ExperimentConfig:
        """Build a config, applying SHORTLINK_EXPERIMENT_* overrides."""
        return cls(
            confidence_level=float(os.getenv("SHORTLINK_EXPERIMENT_CONFIDENCE", CONFIDENCE_LEVEL)),
            power=float(os.getenv("SHORTLINK_EXPERIMENT_POWER", POWER)),
            minimum_relative_effect=float(
                os.getenv("SHORTLINK_EXPERIMENT_MIN_EFFECT", MINIMUM_RELATIVE_EFFECT)
            ),
        )
