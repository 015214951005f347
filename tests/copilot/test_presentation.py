"""Tests for src.copilot.presentation module."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.common.triage.models import PriorityBand
from src.copilot.presentation import (
    DatedRow,
    band_badge_class,
    format_datetime,
    score_badge_class,
    score_tier,
)


# =============================================================================
# Score Classification
# =============================================================================


class TestScoreTier:
    """Tests for score_tier and score_badge_class."""

    @pytest.mark.parametrize(
        ("score", "tier"),
        [
            (0, "low"),
            (29, "low"),
            (29.9, "low"),
            (30, "medium"),
            (59, "medium"),
            (60, "high"),
            (79, "high"),
            (80, "critical"),
            (100, "critical"),
        ],
    )
    def test_boundaries(self, score, tier):
        """Test the tier at each boundary."""
        assert score_tier(score) == tier

    def test_badge_class(self):
        """Test the badge class string."""
        assert score_badge_class(85) == "score-badge score-critical"
        assert score_badge_class(10) == "score-badge score-low"


class TestBandBadgeClass:
    """Tests for band_badge_class."""

    @pytest.mark.parametrize(
        ("band", "expected"),
        [
            (PriorityBand.CRITICAL, "slds-badge_inverse badge-critical"),
            ("High", "slds-badge_inverse badge-high"),
            ("Medium", "slds-badge_inverse badge-medium"),
            ("Low", "slds-badge_inverse badge-low"),
            (None, "slds-badge_inverse badge-low"),
            ("Unknown", "slds-badge_inverse badge-low"),
        ],
    )
    def test_band_classes(self, band, expected):
        """Test each band label maps to its badge class."""
        assert band_badge_class(band) == expected

    def test_independent_of_score(self):
        """Test band and score tiers are derived separately."""
        assert score_badge_class(75) == "score-badge score-high"
        assert band_badge_class("Critical") == "slds-badge_inverse badge-critical"


# =============================================================================
# Date Formatting
# =============================================================================


class TestFormatDatetime:
    """Tests for format_datetime."""

    def test_datetime(self):
        """Test a morning timestamp."""
        value = datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)
        assert format_datetime(value) == "Jan 5, 2026, 09:30 AM"

    def test_afternoon(self):
        """Test a 12-hour afternoon timestamp."""
        assert format_datetime(datetime(2026, 3, 14, 15, 5)) == "Mar 14, 2026, 03:05 PM"

    def test_iso_string(self):
        """Test an ISO 8601 string with a Z suffix."""
        assert format_datetime("2026-01-05T09:30:00Z") == "Jan 5, 2026, 09:30 AM"

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value):
        """Test missing values format as blank."""
        assert format_datetime(value) == ""

    def test_unparsable_returned_as_is(self):
        """Test an unparsable value is shown unchanged."""
        assert format_datetime("last Tuesday") == "last Tuesday"


class TestDatedRow:
    """Tests for DatedRow."""

    def test_pairs_record_and_date(self):
        """Test a row keeps its record and formatted date."""
        row = DatedRow(record={"id": 1}, formatted_date="Jan 5, 2026, 09:30 AM")

        assert row.record == {"id": 1}
        assert row.formatted_date == "Jan 5, 2026, 09:30 AM"
