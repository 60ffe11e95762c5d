"""Shared pytest fixtures for Shortlink packages."""

from datetime import UTC, datetime, timedelta

import pytest


@pytest.fixture
def conversion_time():
    """Conversion instant shared by the journey fixtures."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def sample_touchpoint_rows(conversion_time):
    """Touchpoint rows as the storage collaborator returns them (unordered)."""
    return [
        {
            "id": 3,
            "session_id": "sess-001",
            "short_code": "spring3",
            "campaign_source": "",
            "campaign_medium": "",
            "campaign_name": "",
            "referrer": "",
            "touchpoint_time": (conversion_time - timedelta(hours=1)).isoformat(),
        },
        {
            "id": 1,
            "session_id": "sess-001",
            "short_code": "spring1",
            "campaign_source": "google",
            "campaign_medium": "cpc",
            "campaign_name": "spring_sale",
            "referrer": "https://www.google.com/",
            "touchpoint_time": (conversion_time - timedelta(days=7)).isoformat(),
        },
        {
            "id": 2,
            "session_id": "sess-001",
            "short_code": "spring2",
            "campaign_source": "newsletter",
            "campaign_medium": "email",
            "campaign_name": "spring_sale",
            "referrer": "",
            "touchpoint_time": (conversion_time - timedelta(days=3)).isoformat(),
        },
    ]


@pytest.fixture
def sample_variant_counts():
    """Control/variant counters with a clear lift (5% vs 8%)."""
    return {
        "control": {"sessions": 1000, "conversions": 50},
        "variant": {"sessions": 1000, "conversions": 80},
    }
