"""
Attribution - distribute conversion credit across a journey's touchpoints.

Supports multiple attribution models:
- First-touch: Credit to first touchpoint
- Last-touch: Credit to last touchpoint
- Linear: Equal credit to all touchpoints
- Time-decay: More credit to recent touchpoints (7-day half-life)
- Position-based: 40% first, 40% last, 20% middle
- Data-driven: Credit proportional to historical channel conversion rate

Weights for a non-empty journey always sum to 1.0.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime

from shortlink.attribution.config import AttributionConfig
from shortlink.attribution.exceptions import InvalidModelError
from shortlink.attribution.schema import (
    AttributionModel,
    ConversionJourney,
    Touchpoint,
    TouchpointAttribution,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = AttributionConfig()


def attribute(
    journey: ConversionJourney,
    model: AttributionModel | str,
    conversion_value: float = 0.0,
    config: AttributionConfig | None = None,
    channel_rates: Mapping[str, float] | None = None,
) -> list[TouchpointAttribution]:
    """
    Attribute a conversion to the touchpoints of its journey.

    Args:
        journey: Touchpoints preceding the conversion, in any order
        model: Attribution model to use
        conversion_value: Value apportioned to touchpoints by weight
        config: Model constants (half-life, position weights)
        channel_rates: Historical conversion rate per channel key,
            used by the data-driven model

    Returns:
        One TouchpointAttribution per touchpoint in chronological order,
        or an empty list for an empty journey

    Raises:
        InvalidModelError: If model is not a known attribution model
    """
    model = AttributionModel.parse(model)
    config = config or _DEFAULT_CONFIG

    touchpoints = journey.chronological()
    if not touchpoints:
        return []

    if len(touchpoints) == 1:
        weights = [1.0]
    elif model == AttributionModel.FIRST_TOUCH:
        weights = _first_touch_weights(touchpoints)
    elif model == AttributionModel.LAST_TOUCH:
        weights = _last_touch_weights(touchpoints)
    elif model == AttributionModel.LINEAR:
        weights = _linear_weights(touchpoints)
    elif model == AttributionModel.TIME_DECAY:
        weights = _time_decay_weights(touchpoints, journey.converted_at, config)
    elif model == AttributionModel.POSITION_BASED:
        weights = _position_based_weights(touchpoints, config)
    elif model == AttributionModel.DATA_DRIVEN:
        weights = _data_driven_weights(touchpoints, channel_rates or {}, config)
    else:
        raise InvalidModelError(model)

    logger.debug(
        f"Attributed conversion {journey.conversion_id} across "
        f"{len(touchpoints)} touchpoints using {model.value}"
    )

    return [
        TouchpointAttribution(
            touchpoint_id=touchpoint.touchpoint_id,
            weight=weight,
            model=model,
            short_code=touchpoint.short_code,
            value=conversion_value * weight,
        )
        for touchpoint, weight in zip(touchpoints, weights)
    ]


class AttributionResolver:
    """
    Attribution bound to one configuration.

    Example:
        resolver = AttributionResolver(AttributionConfig(half_life_hours=72))
        credits = resolver.attribute(journey, AttributionModel.TIME_DECAY)
    """

    def __init__(
        self,
        config: AttributionConfig | None = None,
        channel_rates: Mapping[str, float] | None = None,
    ):
        self.config = config or AttributionConfig()
        self.channel_rates = dict(channel_rates or {})

    def attribute(
        self,
        journey: ConversionJourney,
        model: AttributionModel | str,
        conversion_value: float = 0.0,
    ) -> list[TouchpointAttribution]:
        """Attribute a journey using this resolver's configuration."""
        return attribute(
            journey,
            model,
            conversion_value=conversion_value,
            config=self.config,
            channel_rates=self.channel_rates,
        )


def _first_touch_weights(touchpoints: list[Touchpoint]) -> list[float]:
    """All credit to the first touchpoint."""
    weights = [0.0] * len(touchpoints)
    weights[0] = 1.0
    return weights


def _last_touch_weights(touchpoints: list[Touchpoint]) -> list[float]:
    """All credit to the last touchpoint before conversion."""
    weights = [0.0] * len(touchpoints)
    weights[-1] = 1.0
    return weights


def _linear_weights(touchpoints: list[Touchpoint]) -> list[float]:
    """Distribute credit equally across all touchpoints."""
    weight = 1.0 / len(touchpoints)
    return [weight] * len(touchpoints)


def _time_decay_weights(
    touchpoints: list[Touchpoint],
    converted_at: datetime | None,
    config: AttributionConfig,
) -> list[float]:
    """
    More credit to recent touchpoints.

    Exponential decay 2^(-hours_before / half_life). Without an explicit
    conversion instant the last touchpoint stands in for it. Ages are taken
    relative to the most recent touchpoint so the largest raw weight is 1
    and the sum never underflows to 0.
    """
    reference = converted_at or touchpoints[-1].occurred_at
    hours_before = [
        max((reference - touchpoint.occurred_at).total_seconds() / 3600, 0.0)
        for touchpoint in touchpoints
    ]
    newest = min(hours_before)
    raw = [math.pow(2.0, -(hours - newest) / config.half_life_hours) for hours in hours_before]

    total = sum(raw)
    return [w / total for w in raw]


def _position_based_weights(
    touchpoints: list[Touchpoint],
    config: AttributionConfig,
) -> list[float]:
    """
    40% to first, 40% to last, 20% distributed to middle.

    Two touchpoints split 50/50.
    """
    count = len(touchpoints)
    if count == 2:
        return [0.5, 0.5]

    endpoint = config.position_endpoint_weight
    middle = config.position_middle_weight / (count - 2)
    return [endpoint] + [middle] * (count - 2) + [endpoint]


def _data_driven_weights(
    touchpoints: list[Touchpoint],
    channel_rates: Mapping[str, float],
    config: AttributionConfig,
) -> list[float]:
    """Credit proportional to each channel's historical conversion rate."""
    raw = []
    for touchpoint in touchpoints:
        rate = channel_rates.get(touchpoint.channel, config.default_channel_rate)
        if rate <= 0:
            rate = config.default_channel_rate
        raw.append(rate)

    total = sum(raw)
    return [w / total for w in raw]
