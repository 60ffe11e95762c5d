"""
Journey assembly - turn raw touchpoint rows into a ConversionJourney.

Rows come from the storage collaborator in whatever order it returns
them, as a DataFrame or a list of dicts. Column names are mapped onto
Touchpoint fields, timestamps are parsed to UTC, and touchpoints outside
the attribution window are dropped.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

import pandas as pd

from shortlink.attribution.config import LOOKBACK_DAYS
from shortlink.attribution.exceptions import JourneyError
from shortlink.attribution.schema import ConversionJourney, Touchpoint

logger = logging.getLogger(__name__)


class JourneySource(Protocol):
    """Storage collaborator that returns the touchpoint rows of a conversion."""

    def fetch_touchpoints(self, conversion_id: str) -> pd.DataFrame | list[dict[str, Any]]:
        ...


class JourneyBuilder:
    """
    Build conversion journeys from touchpoint rows.

    Example:
        builder = JourneyBuilder(lookback_days=30)
        journey = builder.build(
            "conv-123",
            rows,
            converted_at=datetime(2025, 1, 15, 12, 0, tzinfo=UTC),
        )
    """

    def __init__(
        self,
        lookback_days: int = LOOKBACK_DAYS,
        field_map: dict[str, str] | None = None,
    ):
        """
        Initialize builder.

        Args:
            lookback_days: Maximum days between touchpoint and conversion
            field_map: Mapping of source columns to Touchpoint fields
        """
        self.lookback = timedelta(days=lookback_days)
        self.field_map = field_map or self._default_field_map()

    def _default_field_map(self) -> dict[str, str]:
        """Default column mappings for touchpoint tables."""
        return {
            # Identifier variants
            "id": "touchpoint_id",
            "touchpoint_id": "touchpoint_id",
            # Timestamp variants
            "touchpoint_time": "occurred_at",
            "occurred_at": "occurred_at",
            "timestamp": "occurred_at",
            # Session / link
            "session_id": "session_id",
            "short_code": "short_code",
            # Campaign tagging
            "campaign_source": "campaign_source",
            "utm_source": "campaign_source",
            "campaign_medium": "campaign_medium",
            "utm_medium": "campaign_medium",
            "campaign_name": "campaign_name",
            "utm_campaign": "campaign_name",
            "referrer": "referrer",
        }

    def build(
        self,
        conversion_id: str,
        data: pd.DataFrame | list[dict[str, Any]],
        converted_at: datetime | None = None,
    ) -> ConversionJourney:
        """
        Assemble a journey from touchpoint rows.

        Args:
            conversion_id: Conversion the touchpoints belong to
            data: Touchpoint rows as DataFrame or list of dicts
            converted_at: Conversion instant; enables window filtering

        Returns:
            ConversionJourney holding the touchpoints inside the window

        Raises:
            JourneyError: If a row has no identifier or no parsable timestamp
        """
        df = self._to_dataframe(data)
        if converted_at is not None:
            converted_at = _to_utc(converted_at)

        touchpoints = []
        for _, row in df.iterrows():
            touchpoint = self._to_touchpoint(row.to_dict())

            if converted_at is not None:
                if touchpoint.occurred_at > converted_at:
                    continue  # Touchpoint after conversion
                if converted_at - touchpoint.occurred_at > self.lookback:
                    continue

            touchpoints.append(touchpoint)

        skipped = len(df) - len(touchpoints)
        if skipped:
            logger.debug(
                f"Dropped {skipped} touchpoints outside the attribution window "
                f"for conversion {conversion_id}"
            )

        return ConversionJourney(
            conversion_id=conversion_id,
            touchpoints=tuple(touchpoints),
            converted_at=converted_at,
        )

    def assemble(
        self,
        source: JourneySource,
        conversion_id: str,
        converted_at: datetime | None = None,
    ) -> ConversionJourney:
        """Fetch touchpoint rows from storage and build the journey."""
        return self.build(conversion_id, source.fetch_touchpoints(conversion_id), converted_at)

    def _to_dataframe(
        self,
        data: pd.DataFrame | list[dict[str, Any]],
    ) -> pd.DataFrame:
        """Convert input to DataFrame."""
        if isinstance(data, pd.DataFrame):
            return data
        return pd.DataFrame(data)

    def _to_touchpoint(self, row: dict[str, Any]) -> Touchpoint:
        """Map one row onto a Touchpoint."""
        mapped = {}
        for source_field, target_field in self.field_map.items():
            if source_field in row and not _is_missing(row[source_field]):
                mapped.setdefault(target_field, row[source_field])

        if "touchpoint_id" not in mapped:
            raise JourneyError(f"Touchpoint row has no identifier: {row}")
        if "occurred_at" not in mapped:
            raise JourneyError(f"Touchpoint {mapped['touchpoint_id']} has no timestamp")

        try:
            touchpoint_id = int(mapped["touchpoint_id"])
        except (ValueError, TypeError) as e:
            raise JourneyError(f"Invalid touchpoint id: {mapped['touchpoint_id']}") from e

        try:
            occurred_at = _to_utc(pd.Timestamp(mapped["occurred_at"]).to_pydatetime())
        except (ValueError, TypeError) as e:
            raise JourneyError(
                f"Invalid timestamp for touchpoint {touchpoint_id}: {mapped['occurred_at']}"
            ) from e

        return Touchpoint(
            touchpoint_id=touchpoint_id,
            session_id=str(mapped.get("session_id", "")),
            occurred_at=occurred_at,
            short_code=str(mapped.get("short_code", "")),
            campaign_source=str(mapped.get("campaign_source", "")),
            campaign_medium=str(mapped.get("campaign_medium", "")),
            campaign_name=str(mapped.get("campaign_name", "")),
            referrer=str(mapped.get("referrer", "")),
        )


def _is_missing(value: Any) -> bool:
    """True for None, NaN and NaT cells."""
    if isinstance(value, (list, tuple, dict)):
        return False
    return bool(pd.isna(value))


def _to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
