"""
Unit Tests - Reporting Periods
"""
from datetime import datetime

from mfg_dashboard.reporting.periods import (
    hours_between,
    month_bounds,
    previous_month_bounds,
    start_of_week,
    subtract_months,
    trailing_months,
    trailing_weeks,
    week_label,
    month_label,
    whole_days_between,
)


class TestMonths:
    """Tests for calendar month arithmetic"""

    def test_subtract_months_clamps_day(self):
        assert subtract_months(datetime(2026, 3, 31, 9, 30), 1) == datetime(2026, 2, 28, 9, 30)
        assert subtract_months(datetime(2024, 3, 31), 1) == datetime(2024, 2, 29)

    def test_subtract_months_crosses_year(self):
        assert subtract_months(datetime(2026, 1, 15), 3) == datetime(2025, 10, 15)
        assert subtract_months(datetime(2026, 10, 15), 12) == datetime(2025, 10, 15)

    def test_month_bounds_are_half_open(self):
        start, end = month_bounds(datetime(2026, 12, 20, 8))
        assert start == datetime(2026, 12, 1)
        assert end == datetime(2027, 1, 1)

    def test_previous_month_bounds(self, now):
        assert previous_month_bounds(now) == (datetime(2026, 9, 1), datetime(2026, 10, 1))

    def test_trailing_months_oldest_first(self, now):
        months = trailing_months(now, 12)

        assert len(months) == 12
        assert months[0][0] == datetime(2025, 11, 1)
        assert months[-1] == (datetime(2026, 10, 1), datetime(2026, 11, 1))
        assert month_label(months[0][0]) == "Nov"

    def test_trailing_months_are_contiguous(self, now):
        months = trailing_months(now, 12)
        for (_, end), (next_start, _) in zip(months, months[1:]):
            assert end == next_start


class TestWeeks:
    """Tests for Sunday-based weeks"""

    def test_start_of_week_is_sunday_midnight(self, now):
        assert start_of_week(now) == datetime(2026, 10, 11)
        assert start_of_week(datetime(2026, 10, 11, 0, 0)) == datetime(2026, 10, 11)
        assert start_of_week(datetime(2026, 10, 10, 23, 59)) == datetime(2026, 10, 4)

    def test_week_label(self):
        assert week_label(datetime(2026, 10, 11)) == "Oct 11 - Oct 17"
        assert week_label(datetime(2026, 9, 27)) == "Sep 27 - Oct 3"

    def test_trailing_weeks(self, now):
        weeks = trailing_weeks(now, 8)

        assert len(weeks) == 8
        assert weeks[0][0] == datetime(2026, 8, 23)
        assert weeks[-1] == (datetime(2026, 10, 11), datetime(2026, 10, 18))


class TestDurations:
    """Tests for day and hour durations"""

    def test_whole_days_truncate(self):
        assert whole_days_between(datetime(2026, 9, 1), datetime(2026, 9, 11, 12)) == 10
        assert whole_days_between(datetime(2026, 9, 1), datetime(2026, 9, 3, 23)) == 2
        assert whole_days_between(datetime(2026, 9, 3, 12), datetime(2026, 9, 1)) == -2

    def test_hours_between(self):
        assert hours_between(datetime(2026, 10, 1, 8), datetime(2026, 10, 1, 12, 30)) == 4.5

    def test_missing_bound_counts_as_zero(self):
        assert hours_between(datetime(2026, 10, 1, 8), None) == 0.0
        assert hours_between(None, datetime(2026, 10, 1, 8)) == 0.0
