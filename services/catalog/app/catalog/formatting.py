"""Display strings for catalog responses."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_decimal_hours(hours: Decimal | float | None) -> str | None:
    """``1.5`` -> ``'1 hr 30 min'``, ``2`` -> ``'2 hrs'``, ``0.25`` -> ``'15 min'``.

    Returns None for a missing or non-positive duration.
    """
    if hours is None:
        return None
    total_minutes = int(
        (Decimal(str(hours)) * 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    )
    if total_minutes <= 0:
        return None

    whole_hours, minutes = divmod(total_minutes, 60)
    parts: list[str] = []
    if whole_hours:
        parts.append("1 hr" if whole_hours == 1 else f"{whole_hours} hrs")
    if minutes:
        parts.append(f"{minutes} min")
    return " ".join(parts)


def format_month_year(value: datetime | None) -> str | None:
    """``2025-05-14T09:00Z`` -> ``'May 2025'``, read in UTC."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{MONTH_NAMES[value.month - 1]} {value.year}"


def module_stats(topic_count: int, video_count: int) -> str:
    return f"{topic_count} Topics | {video_count} Video Lectures"


def topic_stats(video_count: int) -> str:
    return f"{video_count} Video Lectures"


def lecture_title(position: int, video_name: str) -> str:
    return f"Lecture:{position} {video_name}"
