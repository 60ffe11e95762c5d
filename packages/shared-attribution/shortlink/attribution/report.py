"""
Attribution reports - compare models for one conversion, aggregate by channel.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

import pandas as pd

from shortlink.attribution.config import AttributionConfig
from shortlink.attribution.resolver import attribute
from shortlink.attribution.schema import (
    AttributionModel,
    AttributionReport,
    ChannelAttribution,
    ConversionJourney,
)

logger = logging.getLogger(__name__)

# Journeys longer than this favour time decay over position-based credit
LONG_JOURNEY_MINUTES = 7 * 24 * 60


def recommend_model(journey: ConversionJourney) -> AttributionModel:
    """
    Suggest the attribution model that best fits a journey's shape.

    - 1 touchpoint: first-touch
    - 2 touchpoints: linear
    - longer than 7 days: time-decay
    - otherwise: position-based
    """
    if journey.total_touches <= 1:
        return AttributionModel.FIRST_TOUCH
    if journey.total_touches == 2:
        return AttributionModel.LINEAR
    if journey.journey_minutes > LONG_JOURNEY_MINUTES:
        return AttributionModel.TIME_DECAY
    return AttributionModel.POSITION_BASED


def build_attribution_report(
    journey: ConversionJourney,
    conversion_value: float = 0.0,
    models: Sequence[AttributionModel | str] | None = None,
    config: AttributionConfig | None = None,
    channel_rates: Mapping[str, float] | None = None,
) -> AttributionReport:
    """
    Attribute one conversion under several models side by side.

    Args:
        journey: Touchpoints preceding the conversion
        conversion_value: Value apportioned by each model
        models: Models to compare (default: all)
        config: Model constants
        channel_rates: Historical channel rates for the data-driven model

    Returns:
        AttributionReport with per-model credits and totals

    Raises:
        InvalidModelError: If any requested model is unknown
    """
    selected = [AttributionModel.parse(m) for m in (models or list(AttributionModel))]

    report = AttributionReport(
        conversion_id=journey.conversion_id,
        total_value=conversion_value,
        journey=journey,
        recommended_model=recommend_model(journey),
    )

    for model in selected:
        credits = attribute(
            journey,
            model,
            conversion_value=conversion_value,
            config=config,
            channel_rates=channel_rates,
        )
        report.breakdown[model] = credits
        report.model_comparison[model] = sum(c.value for c in credits)

    return report


def channel_attribution(
    journeys: Iterable[ConversionJourney],
    model: AttributionModel | str = AttributionModel.LINEAR,
    conversion_values: Mapping[str, float] | None = None,
    config: AttributionConfig | None = None,
    channel_rates: Mapping[str, float] | None = None,
) -> list[ChannelAttribution]:
    """
    Aggregate attribution credit by campaign source and medium.

    Args:
        journeys: Converted journeys to aggregate
        model: Attribution model used to split each conversion
        conversion_values: Conversion value per conversion id (default 0)
        config: Model constants
        channel_rates: Historical channel rates for the data-driven model

    Returns:
        ChannelAttribution rows sorted by attributed value, then attributed
        conversions, descending
    """
    model = AttributionModel.parse(model)
    conversion_values = conversion_values or {}

    records = []
    for journey in journeys:
        value = conversion_values.get(journey.conversion_id, 0.0)
        credits = attribute(
            journey,
            model,
            conversion_value=value,
            config=config,
            channel_rates=channel_rates,
        )
        # Credits come back in chronological order, one per touchpoint
        for touchpoint, credit in zip(journey.chronological(), credits):
            records.append({
                "source": touchpoint.campaign_source or "direct",
                "medium": touchpoint.campaign_medium or "none",
                "conversion_id": journey.conversion_id,
                "touchpoint_id": touchpoint.touchpoint_id,
                "weight": credit.weight,
                "value": credit.value,
            })

    if not records:
        return []

    df = pd.DataFrame.from_records(records)
    grouped = (
        df.groupby(["source", "medium"], sort=False)
        .agg(
            touchpoints=("touchpoint_id", "size"),
            conversions=("conversion_id", "nunique"),
            attributed_conversions=("weight", "sum"),
            attributed_value=("value", "sum"),
        )
        .reset_index()
        .sort_values(["attributed_value", "attributed_conversions"], ascending=False)
    )

    channels = []
    for row in grouped.itertuples(index=False):
        touchpoints = int(row.touchpoints)
        conversions = int(row.conversions)
        channels.append(ChannelAttribution(
            source=row.source,
            medium=row.medium,
            touchpoints=touchpoints,
            conversions=conversions,
            attributed_conversions=float(row.attributed_conversions),
            attributed_value=float(row.attributed_value),
            conversion_rate=conversions / touchpoints * 100 if touchpoints else 0.0,
        ))

    logger.debug(f"Aggregated {len(records)} touchpoints into {len(channels)} channels")
    return channels
