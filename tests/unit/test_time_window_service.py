"""
Unit tests for reporting window resolution.
"""

import pytest
from datetime import datetime, timedelta, timezone

from models.dashboard import Period
from services.time_window_service import parse_period, resolve_start, resolve_window


NOW = datetime(2025, 8, 20, 15, 30, 45, 123456, tzinfo=timezone.utc)


class TestParsePeriod:

    @pytest.mark.parametrize("token,expected", [
        ("month", Period.MONTH),
        ("quarter", Period.QUARTER),
        ("year", Period.YEAR),
        ("all", Period.ALL),
    ])
    def test_known_tokens(self, token, expected):
        assert parse_period(token) == expected

    @pytest.mark.parametrize("token", [None, "", "week", "forever", "12m", "YEAR", " month", "Quarter"])
    def test_unknown_tokens_fall_back_to_all(self, token):
        assert parse_period(token) == Period.ALL

    def test_enum_passes_through(self):
        assert parse_period(Period.QUARTER) == Period.QUARTER


class TestResolveStart:

    def test_month_starts_on_first_day(self):
        assert resolve_start(Period.MONTH, NOW) == datetime(2025, 8, 1, tzinfo=timezone.utc)

    def test_quarter_starts_on_block_boundary(self):
        # August is in the Jul-Sep block
        assert resolve_start(Period.QUARTER, NOW) == datetime(2025, 7, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("month,expected_month", [
        (1, 1), (3, 1), (4, 4), (6, 4), (7, 7), (9, 7), (10, 10), (12, 10),
    ])
    def test_quarter_blocks(self, month, expected_month):
        now = NOW.replace(month=month, day=15)
        assert resolve_start(Period.QUARTER, now).month == expected_month

    def test_year_starts_on_january_first(self):
        assert resolve_start(Period.YEAR, NOW) == datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_all_is_unbounded(self):
        start = resolve_start(Period.ALL, NOW)
        assert start.year == 1
        assert start.tzinfo == timezone.utc

    def test_keeps_timezone_of_now(self):
        tz = timezone(timedelta(hours=-5))
        now = datetime(2025, 3, 10, 8, 0, tzinfo=tz)
        assert resolve_start(Period.MONTH, now) == datetime(2025, 3, 1, tzinfo=tz)


class TestResolveWindow:

    def test_end_is_now(self):
        window = resolve_window("month", NOW)
        assert window.end == NOW
        assert window.period == Period.MONTH

    def test_unknown_period_gives_unbounded_window(self):
        window = resolve_window("bogus", NOW)
        assert window.period == Period.ALL
        assert window.is_unbounded

    def test_bounded_window_is_not_unbounded(self):
        assert not resolve_window("year", NOW).is_unbounded

    @pytest.mark.parametrize("now", [
        NOW,
        datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc),
        datetime(2024, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
        datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc),
    ])
    def test_windows_are_nested(self, now):
        starts = {p: resolve_window(p, now).start for p in ("all", "year", "quarter", "month")}
        assert starts["all"] <= starts["year"] <= starts["quarter"] <= starts["month"] <= now

    def test_contains_uses_inclusive_start(self):
        window = resolve_window("month", NOW)
        assert window.contains(datetime(2025, 8, 1, tzinfo=timezone.utc))
        assert not window.contains(datetime(2025, 7, 31, 23, 59, 59, tzinfo=timezone.utc))
