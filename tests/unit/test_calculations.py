"""
Unit Tests - Metric Calculations
"""
from decimal import Decimal

import pytest

from mfg_dashboard.reporting.calculations import (
    StockStatus,
    classify_stock,
    days_until_stockout,
    decimal_sum,
    format_growth,
    format_money,
    has_defects,
    is_low_stock,
    parse_defects,
    percentage,
    to_decimal,
)

FACTOR = Decimal("1.2")


class TestFormatGrowth:
    """Tests for period-over-period growth strings"""

    def test_zero_baseline_reports_fixed_growth(self):
        assert format_growth(150, 0) == "+100%"
        assert format_growth(0, 0) == "+100%"
        assert format_growth(Decimal("10.00"), None) == "+100%"

    def test_positive_growth_has_explicit_sign(self):
        assert format_growth(150, 100) == "+50.0%"
        assert format_growth(Decimal("150.00"), Decimal("50.00")) == "+200.0%"

    def test_negative_growth(self):
        assert format_growth(75, 100) == "-25.0%"

    def test_no_change_is_positive_zero(self):
        assert format_growth(2, 2) == "+0.0%"

    def test_rounds_to_one_decimal_half_up(self):
        assert format_growth(4, 3) == "+33.3%"
        assert format_growth(Decimal("100.05"), 100) == "+0.1%"
        assert format_growth(2, 3) == "-33.3%"

    def test_tiny_decline_rounds_to_positive_zero(self):
        assert format_growth(Decimal("99.99"), 100) == "+0.0%"


class TestMoneyAndRatios:
    """Tests for Decimal coercion, money formatting and ratios"""

    def test_to_decimal_avoids_float_noise(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(None) == Decimal("0")
        assert to_decimal(7) == Decimal("7")

    def test_decimal_sum(self):
        assert decimal_sum([Decimal("100.50"), None, 0.25, 2]) == Decimal("102.75")
        assert decimal_sum([]) == Decimal("0")

    def test_format_money(self):
        assert format_money(Decimal("150")) == "150.00"
        assert format_money(Decimal("10.005")) == "10.01"
        assert format_money(None) == "0.00"

    def test_percentage(self):
        assert percentage(1, 4) == 25.0
        assert percentage(Decimal("60"), Decimal("110")) == pytest.approx(54.5454, rel=1e-4)

    def test_percentage_zero_denominator(self):
        assert percentage(5, 0) == 0.0
        assert percentage(0, 0.0) == 0.0


class TestStockClassification:
    """Tests for low-stock detection"""

    @pytest.mark.parametrize(
        "current, minimum, expected",
        [
            (8, 10, StockStatus.CRITICAL),
            (10, 10, StockStatus.CRITICAL),
            (11, 10, StockStatus.WARNING),
            (12, 10, StockStatus.WARNING),
            (13, 10, None),
            (0, 0, StockStatus.CRITICAL),
        ],
    )
    def test_classify_stock(self, current, minimum, expected):
        assert classify_stock(current, minimum, FACTOR) == expected

    def test_threshold_is_exact(self):
        assert is_low_stock(6, 5, FACTOR)
        assert not is_low_stock(7, 5, FACTOR)


class TestDaysUntilStockout:
    """Tests for stockout projection"""

    def test_no_consumption_is_unknown(self):
        assert days_until_stockout(8, 0, 30) is None

    def test_floors_to_whole_days(self):
        assert days_until_stockout(12, 45, 30) == 8
        assert days_until_stockout(50, 45, 30) == 33

    def test_decimal_consumption(self):
        assert days_until_stockout(100, Decimal("30.0000"), 30) == 100

    def test_empty_stock(self):
        assert days_until_stockout(0, 10, 30) == 0


class TestDefects:
    """Tests for defect tag parsing"""

    def test_parse_defects_trims_and_drops_empty(self):
        assert parse_defects(" scratch, ,dent ,") == ["scratch", "dent"]

    def test_parse_defects_empty(self):
        assert parse_defects(None) == []
        assert parse_defects("   ") == []

    def test_has_defects(self):
        assert has_defects("burr")
        assert not has_defects("   ")
        assert not has_defects("")
        assert not has_defects(None)
