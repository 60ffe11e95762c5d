"""
Shortlink Attribution - multi-touch credit for short link conversions.

Provides:
- Touchpoint / journey schema
- Journey assembly from storage rows (DataFrame or list of dicts)
- Attribution across first-touch, last-touch, linear, time-decay,
  position-based and data-driven models
- Per-conversion model comparison and per-channel aggregation

Usage:
    from shortlink.attribution import (
        AttributionModel,
        JourneyBuilder,
        attribute,
    )

    journey = JourneyBuilder().build("conv-123", touchpoint_rows)
    credits = attribute(journey, AttributionModel.POSITION_BASED)
"""

from shortlink.attribution.config import AttributionConfig
from shortlink.attribution.exceptions import (
    AttributionError,
    InvalidModelError,
    JourneyError,
)
from shortlink.attribution.journey import JourneyBuilder, JourneySource
from shortlink.attribution.report import (
    build_attribution_report,
    channel_attribution,
    recommend_model,
)
from shortlink.attribution.resolver import AttributionResolver, attribute
from shortlink.attribution.schema import (
    AttributionModel,
    AttributionReport,
    ChannelAttribution,
    ConversionJourney,
    Touchpoint,
    TouchpointAttribution,
)

__all__ = [
    # Schema
    "Touchpoint",
    "ConversionJourney",
    "TouchpointAttribution",
    "AttributionModel",
    "AttributionReport",
    "ChannelAttribution",
    # Config
    "AttributionConfig",
    # Exceptions
    "AttributionError",
    "InvalidModelError",
    "JourneyError",
    # Journeys
    "JourneyBuilder",
    "JourneySource",
    # Attribution
    "attribute",
    "AttributionResolver",
    # Reports
    "build_attribution_report",
    "channel_attribution",
    "recommend_model",
]
