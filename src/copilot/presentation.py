"""Display derivations for the triage workspace.

Pure functions turning backend data into the values the workspace view
renders. Two independent priority classifications exist and both are kept:

- ``score_tier`` derives a color tier from the numeric score alone.
- ``band_badge_class`` styles the band label the backend returned.

The two can disagree (a score of 75 with a "Critical" band), and the view
shows both as they are.

Score tiers:
    score >= 80       -> critical
    60 <= score < 80  -> high
    30 <= score < 60  -> medium
    score < 30        -> low
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

from src.common.triage.models import PriorityBand

T = TypeVar("T")

SCORE_BADGE_BASE = "score-badge"
BAND_BADGE_BASE = "slds-badge_inverse"


def score_tier(score: float) -> str:
    """Classify a priority score into a color tier.

    Args:
        score: Priority score, nominally 0 to 100.

    Returns:
        One of "critical", "high", "medium", "low".
    """
    if score >= 80:
        return "critical"
    if score >= 60:
        return "high"
    if score >= 30:
        return "medium"
    return "low"


def score_badge_class(score: float) -> str:
    """Return the CSS classes for the score badge."""
    return f"{SCORE_BADGE_BASE} score-{score_tier(score)}"


def band_badge_class(band: PriorityBand | str | None) -> str:
    """Return the CSS classes for the band badge.

    Unknown or missing bands are styled as low.
    """
    label = band.value if isinstance(band, PriorityBand) else band
    modifier = {
        PriorityBand.CRITICAL.value: "badge-critical",
        PriorityBand.HIGH.value: "badge-high",
        PriorityBand.MEDIUM.value: "badge-medium",
    }.get(label or "", "badge-low")
    return f"{BAND_BADGE_BASE} {modifier}"


def format_datetime(value: datetime | str | None) -> str:
    """Format a timestamp as e.g. ``"Jan 5, 2026, 09:30 AM"``.

    Args:
        value: A datetime, an ISO 8601 string, or None.

    Returns:
        The formatted timestamp, an empty string for a missing value, or the
        input unchanged when it cannot be parsed.
    """
    if not value:
        return ""
    if isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    else:
        moment = value
    return f"{moment:%b} {moment.day}, {moment.year}, {moment:%I:%M %p}"


@dataclass(frozen=True)
class DatedRow(Generic[T]):
    """A record paired with its display date.

    Attributes:
        record: The underlying email, comment or log entry.
        formatted_date: Display form of the record's timestamp.
    """

    record: T
    formatted_date: str
