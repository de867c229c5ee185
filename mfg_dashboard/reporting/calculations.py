"""
Metric Calculations

Pure numeric helpers used by every dashboard metric. Monetary values are
always handled as Decimal; ratios are returned as floats and define the
zero-denominator case as 0.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from fractions import Fraction
from typing import Iterable, List, Optional, Union

Number = Union[int, float, Decimal]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")
TENTH = Decimal("0.1")

GROWTH_WITHOUT_BASELINE = "+100%"


class StockStatus(str, Enum):
    """Alert severity of a stocked item; OK items are never reported"""
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"


def to_decimal(value: Optional[Number]) -> Decimal:
    """
    Coerce a database value to Decimal.

    Floats go through their string form so that a REAL-backed column
    (SQLite) does not leak binary rounding noise into the sums.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def decimal_sum(values: Iterable[Optional[Number]]) -> Decimal:
    return sum((to_decimal(v) for v in values), ZERO)


def format_money(value: Optional[Number]) -> str:
    """Fixed-point string with two fraction digits, e.g. '1234.50'"""
    return str(to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def percentage(numerator: Number, denominator: Number) -> float:
    """numerator / denominator * 100, or 0 when the denominator is zero"""
    denominator = to_decimal(denominator)
    if denominator == 0:
        return 0.0
    return float(to_decimal(numerator) / denominator * HUNDRED)


def format_growth(current: Number, previous: Number) -> str:
    """
    Period-over-period growth as a signed one-decimal percentage.

    A zero (or missing) previous value has no meaningful baseline and is
    reported as the fixed '+100%'.
    """
    previous = to_decimal(previous)
    if previous == 0:
        return GROWTH_WITHOUT_BASELINE
    growth = ((to_decimal(current) - previous) / previous * HUNDRED).quantize(
        TENTH, rounding=ROUND_HALF_UP
    )
    if growth == 0:
        growth = abs(growth)
    return f"{growth:+}%"


def is_low_stock(current_stock: int, minimum_stock_level: int, factor: Decimal) -> bool:
    """Stock at or below minimum * factor, compared exactly"""
    return Decimal(current_stock) <= Decimal(minimum_stock_level) * factor


def classify_stock(
    current_stock: int,
    minimum_stock_level: int,
    factor: Decimal,
) -> Optional[StockStatus]:
    """CRITICAL at or below minimum, WARNING up to minimum * factor, else None"""
    if current_stock <= minimum_stock_level:
        return StockStatus.CRITICAL
    if is_low_stock(current_stock, minimum_stock_level, factor):
        return StockStatus.WARNING
    return None


def days_until_stockout(
    current_stock: int,
    consumed: Number,
    period_days: int,
) -> Optional[int]:
    """
    Whole days of stock left at the average daily consumption.

    consumed is the quantity used over period_days. Returns None when
    nothing was consumed, since the stockout date is then unknown.
    """
    consumed = to_decimal(consumed)
    if consumed == 0:
        return None
    return math.floor(Fraction(current_stock) * period_days / Fraction(consumed))


def parse_defects(defects_found: Optional[str]) -> List[str]:
    """Split a comma-delimited defects field into trimmed, non-empty tags"""
    if not defects_found:
        return []
    return [tag.strip() for tag in defects_found.split(",") if tag.strip()]


def has_defects(defects_found: Optional[str]) -> bool:
    return bool(defects_found and defects_found.strip())
