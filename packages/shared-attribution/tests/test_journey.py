"""Tests for journey assembly."""

from datetime import UTC, datetime, timedelta

import pandas as pd
import pytest

from shortlink.attribution.exceptions import JourneyError
from shortlink.attribution.journey import JourneyBuilder


class TestJourneyBuilder:
    """Test JourneyBuilder.build."""

    def test_build_from_list(self, sample_touchpoint_rows):
        """Test building a journey from a list of dicts."""
        journey = JourneyBuilder().build("conv-1", sample_touchpoint_rows)

        assert journey.conversion_id == "conv-1"
        assert journey.total_touches == 3
        assert journey.converted_at is None
        # Storage order is kept; chronological() sorts
        assert [t.touchpoint_id for t in journey.touchpoints] == [3, 1, 2]
        assert [t.touchpoint_id for t in journey.chronological()] == [1, 2, 3]

    def test_build_from_dataframe(self, sample_touchpoint_rows):
        """Test building a journey from a pandas DataFrame."""
        df = pd.DataFrame(sample_touchpoint_rows)

        journey = JourneyBuilder().build("conv-1", df)

        assert journey.total_touches == 3
        first = journey.chronological()[0]
        assert first.campaign_source == "google"
        assert first.campaign_medium == "cpc"
        assert first.campaign_name == "spring_sale"
        assert first.short_code == "spring1"
        assert first.occurred_at.tzinfo is not None

    def test_timestamps_parsed_to_utc(self):
        """Test that offsets and naive timestamps are normalized to UTC."""
        rows = [
            {"id": 1, "touchpoint_time": "2025-01-15T10:00:00+02:00"},
            {"id": 2, "touchpoint_time": datetime(2025, 1, 15, 9, 0, 0)},
        ]

        journey = JourneyBuilder().build("conv-1", rows)

        by_id = {t.touchpoint_id: t for t in journey.touchpoints}
        assert by_id[1].occurred_at == datetime(2025, 1, 15, 8, 0, 0, tzinfo=UTC)
        assert by_id[2].occurred_at == datetime(2025, 1, 15, 9, 0, 0, tzinfo=UTC)

    def test_utm_aliases(self):
        """Test that utm_* columns map onto campaign fields."""
        rows = [{
            "touchpoint_id": 5,
            "timestamp": "2025-01-15T10:00:00Z",
            "utm_source": "reddit",
            "utm_medium": "social",
            "utm_campaign": "launch",
        }]

        touchpoint = JourneyBuilder().build("conv-1", rows).touchpoints[0]

        assert touchpoint.campaign_source == "reddit"
        assert touchpoint.campaign_medium == "social"
        assert touchpoint.campaign_name == "launch"
        assert touchpoint.channel == "reddit_social"

    def test_missing_fields_default_to_empty(self):
        """Test that missing and NaN campaign fields become direct traffic."""
        df = pd.DataFrame([
            {"id": 1, "touchpoint_time": "2025-01-15T10:00:00Z", "campaign_source": "google"},
            {"id": 2, "touchpoint_time": "2025-01-15T11:00:00Z", "campaign_source": None},
        ])

        journey = JourneyBuilder().build("conv-1", df)

        direct = journey.chronological()[1]
        assert direct.campaign_source == ""
        assert direct.is_direct
        assert direct.channel == "direct"

    def test_window_filtering(self, sample_touchpoint_rows, conversion_time):
        """Test that touchpoints outside the lookback window are dropped."""
        rows = sample_touchpoint_rows + [
            {"id": 4, "touchpoint_time": (conversion_time + timedelta(hours=1)).isoformat()},
            {"id": 5, "touchpoint_time": (conversion_time - timedelta(days=45)).isoformat()},
        ]

        journey = JourneyBuilder(lookback_days=30).build(
            "conv-1", rows, converted_at=conversion_time
        )

        assert sorted(t.touchpoint_id for t in journey.touchpoints) == [1, 2, 3]
        assert journey.converted_at == conversion_time

    def test_empty_rows(self):
        """Test that no rows yields an empty journey."""
        journey = JourneyBuilder().build("conv-1", [])

        assert journey.total_touches == 0
        assert journey.session_id is None

    def test_missing_timestamp_raises(self):
        """Test that a row without a timestamp is rejected."""
        with pytest.raises(JourneyError, match="no timestamp"):
            JourneyBuilder().build("conv-1", [{"id": 1, "session_id": "s"}])

    def test_missing_identifier_raises(self):
        """Test that a row without an identifier is rejected."""
        with pytest.raises(JourneyError, match="no identifier"):
            JourneyBuilder().build("conv-1", [{"touchpoint_time": "2025-01-15T10:00:00Z"}])

    def test_invalid_timestamp_raises(self):
        """Test that an unparsable timestamp is rejected."""
        with pytest.raises(JourneyError, match="Invalid timestamp"):
            JourneyBuilder().build("conv-1", [{"id": 1, "touchpoint_time": "not-a-date"}])

    def test_custom_field_map(self):
        """Test building with a custom field map."""
        builder = JourneyBuilder(field_map={
            "click_id": "touchpoint_id",
            "clicked_at": "occurred_at",
            "source": "campaign_source",
        })

        journey = builder.build("conv-1", [
            {"click_id": "17", "clicked_at": "2025-01-15T10:00:00Z", "source": "meta"},
        ])

        touchpoint = journey.touchpoints[0]
        assert touchpoint.touchpoint_id == 17
        assert touchpoint.campaign_source == "meta"


class TestAssemble:
    """Test JourneyBuilder.assemble with a storage collaborator."""

    def test_assemble_fetches_rows(self, sample_touchpoint_rows, conversion_time):
        """Test that assemble queries the source by conversion id."""

        class FakeSource:
            def __init__(self):
                self.requested = []

            def fetch_touchpoints(self, conversion_id):
                self.requested.append(conversion_id)
                return sample_touchpoint_rows

        source = FakeSource()

        journey = JourneyBuilder().assemble(source, "conv-9", converted_at=conversion_time)

        assert source.requested == ["conv-9"]
        assert journey.conversion_id == "conv-9"
        assert journey.total_touches == 3
        assert journey.session_id == "sess-001"
