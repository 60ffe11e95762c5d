"""Tests for attribution reports and channel aggregation."""

from datetime import UTC, datetime, timedelta

import pytest

from shortlink.attribution.exceptions import InvalidModelError
from shortlink.attribution.report import (
    build_attribution_report,
    channel_attribution,
    recommend_model,
)
from shortlink.attribution.schema import (
    AttributionModel,
    ConversionJourney,
    Touchpoint,
)

CONVERSION = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


def touch(touchpoint_id, before, source="", medium=""):
    return Touchpoint(
        touchpoint_id=touchpoint_id,
        session_id="sess",
        occurred_at=CONVERSION - before,
        short_code=f"code{touchpoint_id}",
        campaign_source=source,
        campaign_medium=medium,
    )


class TestRecommendModel:
    """Test recommend_model function."""

    def test_single_touchpoint(self):
        """Test first-touch for a one-touch journey."""
        journey = ConversionJourney("c", [touch(1, timedelta(hours=1))])
        assert recommend_model(journey) == AttributionModel.FIRST_TOUCH

    def test_empty_journey(self):
        """Test first-touch for an empty journey."""
        assert recommend_model(ConversionJourney("c")) == AttributionModel.FIRST_TOUCH

    def test_two_touchpoints(self):
        """Test linear for a two-touch journey."""
        journey = ConversionJourney("c", [
            touch(1, timedelta(days=20)),
            touch(2, timedelta(hours=1)),
        ])
        assert recommend_model(journey) == AttributionModel.LINEAR

    def test_long_journey(self):
        """Test time-decay for journeys longer than a week."""
        journey = ConversionJourney("c", [
            touch(1, timedelta(days=10)),
            touch(2, timedelta(days=5)),
            touch(3, timedelta(hours=1)),
        ])
        assert recommend_model(journey) == AttributionModel.TIME_DECAY

    def test_short_journey(self):
        """Test position-based for short multi-touch journeys."""
        journey = ConversionJourney("c", [
            touch(1, timedelta(days=3)),
            touch(2, timedelta(days=2)),
            touch(3, timedelta(hours=1)),
        ])
        assert recommend_model(journey) == AttributionModel.POSITION_BASED


class TestBuildAttributionReport:
    """Test build_attribution_report function."""

    def test_all_models(self):
        """Test that every model appears in the report with the full value."""
        journey = ConversionJourney("conv-1", [
            touch(2, timedelta(days=2)),
            touch(1, timedelta(days=4)),
            touch(3, timedelta(hours=1)),
        ])

        report = build_attribution_report(journey, conversion_value=200.0)

        assert set(report.breakdown) == set(AttributionModel)
        for model, total in report.model_comparison.items():
            assert total == pytest.approx(200.0), model
        assert report.recommended_model == AttributionModel.POSITION_BASED
        first_touch = report.breakdown[AttributionModel.FIRST_TOUCH]
        assert first_touch[0].touchpoint_id == 1
        assert first_touch[0].value == pytest.approx(200.0)

    def test_selected_models(self):
        """Test restricting the report to some models."""
        journey = ConversionJourney("conv-1", [touch(1, timedelta(hours=1))])

        report = build_attribution_report(journey, models=["linear", AttributionModel.LAST_TOUCH])

        assert list(report.breakdown) == [AttributionModel.LINEAR, AttributionModel.LAST_TOUCH]

    def test_invalid_model(self):
        """Test that an unknown model in the selection raises."""
        journey = ConversionJourney("conv-1", [touch(1, timedelta(hours=1))])

        with pytest.raises(InvalidModelError):
            build_attribution_report(journey, models=["linear", "markov"])

    def test_to_dict(self):
        """Test serialization for the reporting collaborator."""
        journey = ConversionJourney("conv-1", [
            touch(1, timedelta(hours=3)),
            touch(2, timedelta(hours=1)),
        ])

        data = build_attribution_report(
            journey, conversion_value=10.0, models=[AttributionModel.LINEAR]
        ).to_dict()

        assert data["conversion_id"] == "conv-1"
        assert data["total_touches"] == 2
        assert data["journey_time_minutes"] == 120
        assert data["recommended_model"] == "linear"
        assert data["model_comparison"] == {"linear": pytest.approx(10.0)}
        assert data["attribution_breakdown"]["linear"][0] == {
            "touchpoint_id": 1,
            "short_code": "code1",
            "attribution_model": "linear",
            "weight": pytest.approx(0.5),
            "attribution_value": pytest.approx(5.0),
        }


class TestChannelAttribution:
    """Test channel_attribution function."""

    def test_aggregates_by_source_and_medium(self):
        """Test grouping credit across journeys."""
        journeys = [
            ConversionJourney("conv-1", [
                touch(1, timedelta(days=2), "google", "cpc"),
                touch(2, timedelta(hours=1), "newsletter", "email"),
            ]),
            ConversionJourney("conv-2", [
                touch(3, timedelta(days=1), "google", "cpc"),
                touch(4, timedelta(hours=2)),
            ]),
        ]

        channels = channel_attribution(
            journeys,
            AttributionModel.LINEAR,
            conversion_values={"conv-1": 100.0, "conv-2": 50.0},
        )

        by_channel = {c.channel: c for c in channels}
        assert set(by_channel) == {"google/cpc", "newsletter/email", "direct/none"}

        google = by_channel["google/cpc"]
        assert google.touchpoints == 2
        assert google.conversions == 2
        assert google.attributed_conversions == pytest.approx(1.0)
        assert google.attributed_value == pytest.approx(75.0)
        assert google.conversion_rate == pytest.approx(100.0)

        assert channels[0].channel == "google/cpc"
        assert sum(c.attributed_conversions for c in channels) == pytest.approx(2.0)

    def test_last_touch_credit(self):
        """Test that last-touch credits only closing channels."""
        journeys = [
            ConversionJourney("conv-1", [
                touch(1, timedelta(days=2), "google", "cpc"),
                touch(2, timedelta(hours=1), "newsletter", "email"),
            ]),
        ]

        channels = channel_attribution(journeys, "last_touch")

        by_channel = {c.channel: c for c in channels}
        assert by_channel["newsletter/email"].attributed_conversions == pytest.approx(1.0)
        assert by_channel["google/cpc"].attributed_conversions == pytest.approx(0.0)
        assert channels[0].channel == "newsletter/email"

    def test_data_driven_uses_channel_rates(self):
        """Test that data-driven channel credit follows the supplied rates."""
        journeys = [
            ConversionJourney("conv-1", [
                touch(1, timedelta(days=2), "google", "cpc"),
                touch(2, timedelta(hours=1), "bing", "cpc"),
            ]),
        ]

        channels = channel_attribution(
            journeys,
            AttributionModel.DATA_DRIVEN,
            conversion_values={"conv-1": 100.0},
            channel_rates={"google_cpc": 0.9, "bing_cpc": 0.1},
        )

        by_channel = {c.channel: c for c in channels}
        assert by_channel["google/cpc"].attributed_conversions == pytest.approx(0.9)
        assert by_channel["bing/cpc"].attributed_conversions == pytest.approx(0.1)
        assert by_channel["google/cpc"].attributed_value == pytest.approx(90.0)
        assert channels[0].channel == "google/cpc"

    def test_duplicate_touchpoint_ids(self):
        """Test that repeated ids are counted per row, within and across journeys."""
        journeys = [
            ConversionJourney("conv-1", [
                touch(1, timedelta(days=2), "google", "cpc"),
                touch(1, timedelta(hours=1), "google", "cpc"),
            ]),
            ConversionJourney("conv-2", [
                touch(1, timedelta(days=1), "google", "cpc"),
            ]),
        ]

        channels = channel_attribution(journeys, AttributionModel.LINEAR)

        assert len(channels) == 1
        google = channels[0]
        assert google.touchpoints == 3
        assert google.conversions == 2
        assert google.attributed_conversions == pytest.approx(2.0)

    def test_no_journeys(self):
        """Test that no input yields no channels."""
        assert channel_attribution([]) == []
