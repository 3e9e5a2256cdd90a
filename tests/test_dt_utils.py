"""Tests for dt_utils and math_utils."""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from freezegun import freeze_time
import pytest

from familyflow.utils import dt_utils, math_utils


class TestParsing:
    """Tests for dt_parse."""

    def test_z_suffix(self) -> None:
        """Trailing Z is UTC."""
        assert dt_utils.dt_parse("2025-03-01T00:00:00Z") == datetime(
            2025, 3, 1, tzinfo=UTC
        )

    def test_naive_is_utc(self) -> None:
        """Naive strings are taken as UTC."""
        parsed = dt_utils.dt_parse("2025-03-01T10:00:00")
        assert parsed is not None
        assert parsed.tzinfo is UTC

    @pytest.mark.parametrize("value", [None, "", "not a date"])
    def test_unparseable(self, value: str | None) -> None:
        """Garbage yields None."""
        assert dt_utils.dt_parse(value) is None


class TestMonthWindows:
    """Tests for dt_month_bounds and dt_in_month."""

    def test_december_rolls_into_january(self) -> None:
        """Window end crosses the year boundary."""
        start, end = dt_utils.dt_month_bounds(12, 2024)
        assert start == datetime(2024, 12, 1, tzinfo=ZoneInfo("UTC"))
        assert end == datetime(2025, 1, 1, tzinfo=ZoneInfo("UTC"))

    def test_window_is_half_open(self) -> None:
        """First instant is in, first instant of next month is out."""
        assert dt_utils.dt_in_month("2025-03-01T00:00:00+00:00", 3, 2025)
        assert not dt_utils.dt_in_month("2025-04-01T00:00:00+00:00", 3, 2025)
        assert dt_utils.dt_in_month("2025-03-31T23:59:59+00:00", 3, 2025)

    def test_missing_timestamp_never_in_month(self) -> None:
        """None is outside every month."""
        assert not dt_utils.dt_in_month(None, 3, 2025)

    def test_default_timezone_shifts_window(self) -> None:
        """00:30 UTC on April 1st is still March in New York."""
        stamp = "2025-04-01T00:30:00+00:00"
        assert not dt_utils.dt_in_month(stamp, 3, 2025)
        dt_utils.set_default_timezone(ZoneInfo("America/New_York"))
        assert dt_utils.dt_in_month(stamp, 3, 2025)
        assert not dt_utils.dt_in_month(stamp, 4, 2025)


class TestNow:
    """Tests for current-time helpers."""

    @freeze_time("2025-03-15 12:00:00", tz_offset=0)
    def test_now_iso(self) -> None:
        """Now is rendered as an aware UTC ISO string."""
        assert dt_utils.dt_now_iso() == "2025-03-15T12:00:00+00:00"


class TestMathUtils:
    """Tests for amount rounding."""

    def test_round_amount(self) -> None:
        """Two decimal places."""
        assert math_utils.round_amount(10.456) == 10.46

    def test_sum_amounts(self) -> None:
        """Float drift is rounded away; empty sums to zero."""
        assert math_utils.sum_amounts([0.1, 0.2]) == 0.3
        assert math_utils.sum_amounts([]) == 0.0
