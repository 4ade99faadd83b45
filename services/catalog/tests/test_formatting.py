from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.catalog.formatting import (
    format_decimal_hours,
    format_month_year,
    lecture_title,
    module_stats,
    topic_stats,
)


@pytest.mark.parametrize(
    ("hours", "expected"),
    [
        (Decimal("1.5"), "1 hr 30 min"),
        (Decimal("2"), "2 hrs"),
        (Decimal("0.25"), "15 min"),
        (Decimal("1.25"), "1 hr 15 min"),
        (Decimal("10.00"), "10 hrs"),
        (1.0, "1 hr"),
    ],
)
def test_format_decimal_hours(hours, expected) -> None:
    assert format_decimal_hours(hours) == expected


@pytest.mark.parametrize("hours", [None, Decimal("0"), Decimal("-1"), Decimal("0.001")])
def test_format_decimal_hours_empty(hours) -> None:
    assert format_decimal_hours(hours) is None


def test_stats_strings() -> None:
    assert module_stats(3, 12) == "3 Topics | 12 Video Lectures"
    assert module_stats(0, 0) == "0 Topics | 0 Video Lectures"
    assert topic_stats(4) == "4 Video Lectures"


def test_lecture_title() -> None:
    assert lecture_title(2, "ECG Basics") == "Lecture:2 ECG Basics"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (datetime(2025, 5, 14, 9, 0, tzinfo=timezone.utc), "May 2025"),
        (datetime(2024, 12, 31, 23, 0), "December 2024"),
        # 01:00 on Jan 1st at +05:30 is still December in UTC
        (datetime(2025, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=5, minutes=30))), "December 2024"),
        (None, None),
    ],
)
def test_format_month_year(value, expected) -> None:
    assert format_month_year(value) == expected
