"""
Sales Metrics

Product and category performance, monthly and weekly order series, and the
most recent customer orders.
"""

from datetime import datetime
from typing import Dict, List, Optional

import structlog
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from mfg_dashboard.config import get_settings
from mfg_dashboard.database.models import (
    Customer,
    CustomerOrder,
    OrderLine,
    Product,
    ProductCategory,
    RecordStatus,
)
from mfg_dashboard.reporting.calculations import (
    ZERO,
    decimal_sum,
    format_money,
    percentage,
    to_decimal,
)
from mfg_dashboard.reporting.instrumentation import dashboard_metric
from mfg_dashboard.reporting.periods import (
    Period,
    month_label,
    resolve_now,
    subtract_months,
    trailing_months,
    trailing_weeks,
    week_label,
)
from mfg_dashboard.reporting.schemas import (
    CategorySales,
    MonthlySales,
    ProductPerformance,
    RecentOrder,
    WeeklySales,
)

logger = structlog.get_logger(__name__)


def resolve_limit(limit: Optional[int]) -> int:
    if limit is None:
        return get_settings().dashboard.default_limit
    return max(limit, 0)


@dashboard_metric("top products")
async def get_top_performing_products(
    db: AsyncSession,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[ProductPerformance]:
    """
    Active products ranked by revenue over the trailing window.

    Products without order lines in the window are not reported.
    """
    config = get_settings().dashboard
    now = resolve_now(now)
    limit = resolve_limit(limit)
    since = subtract_months(now, config.top_products_months)

    result = await db.execute(
        select(
            Product.id,
            Product.name,
            Product.sku,
            Product.unit_cost,
            OrderLine.quantity,
            OrderLine.unit_price,
        )
        .join(OrderLine, OrderLine.product_id == Product.id)
        .where(
            and_(
                Product.status == RecordStatus.ACTIVE,
                OrderLine.created_at >= since,
            )
        )
    )

    totals: Dict = {}
    for row in result:
        entry = totals.setdefault(row.id, {
            "row": row,
            "sales_count": 0,
            "revenue": ZERO,
        })
        entry["sales_count"] += row.quantity
        entry["revenue"] += to_decimal(row.unit_price) * row.quantity

    performances = []
    for entry in totals.values():
        row = entry["row"]
        revenue = entry["revenue"]
        cost = to_decimal(row.unit_cost) * entry["sales_count"]
        profit = revenue - cost
        performances.append(ProductPerformance(
            id=row.id,
            name=row.name,
            sku=row.sku,
            sales_count=entry["sales_count"],
            revenue=revenue,
            profit=profit,
            profit_margin=percentage(profit, revenue),
        ))

    performances.sort(key=lambda p: p.revenue, reverse=True)
    return performances[:limit]


@dashboard_metric("sales by category")
async def get_sales_by_category(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> List[CategorySales]:
    """
    Revenue share of every active category over the trailing window.

    Categories without sales are included with zero revenue.
    """
    config = get_settings().dashboard
    now = resolve_now(now)
    since = subtract_months(now, config.category_window_months)

    category_result = await db.execute(
        select(ProductCategory.id, ProductCategory.name)
        .where(ProductCategory.status == RecordStatus.ACTIVE)
        .order_by(ProductCategory.name)
    )
    categories = category_result.all()
    if not categories:
        return []

    line_result = await db.execute(
        select(Product.category_id, OrderLine.quantity, OrderLine.unit_price)
        .join(OrderLine, OrderLine.product_id == Product.id)
        .where(
            and_(
                Product.category_id.in_([c.id for c in categories]),
                OrderLine.created_at >= since,
            )
        )
    )

    sales_count: Dict = {c.id: 0 for c in categories}
    revenue: Dict = {c.id: ZERO for c in categories}
    for line in line_result:
        sales_count[line.category_id] += line.quantity
        revenue[line.category_id] += to_decimal(line.unit_price) * line.quantity

    total_revenue = sum(revenue.values(), ZERO)

    breakdown = [
        CategorySales(
            category_id=c.id,
            category_name=c.name,
            sales_count=sales_count[c.id],
            revenue=revenue[c.id],
            percentage=percentage(revenue[c.id], total_revenue),
        )
        for c in categories
    ]
    breakdown.sort(key=lambda c: c.revenue, reverse=True)
    return breakdown


async def _orders_in_period(db: AsyncSession, period: Period):
    start, end = period
    result = await db.execute(
        select(CustomerOrder.total_amount).where(
            and_(
                CustomerOrder.order_date >= start,
                CustomerOrder.order_date < end,
            )
        )
    )
    amounts = result.scalars().all()
    return len(amounts), decimal_sum(amounts)


@dashboard_metric("monthly sales")
async def get_monthly_sales(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> List[MonthlySales]:
    """Order count and revenue for each of the trailing calendar months, oldest first"""
    config = get_settings().dashboard
    now = resolve_now(now)

    series = []
    for period in trailing_months(now, config.monthly_periods):
        orders, revenue = await _orders_in_period(db, period)
        start = period[0]
        series.append(MonthlySales(
            month=month_label(start),
            year=start.year,
            orders=orders,
            revenue=format_money(revenue),
        ))
    return series


@dashboard_metric("weekly sales")
async def get_weekly_sales(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> List[WeeklySales]:
    """Order count and revenue for each of the trailing Sunday-based weeks, oldest first"""
    config = get_settings().dashboard
    now = resolve_now(now)

    series = []
    for period in trailing_weeks(now, config.weekly_periods):
        orders, revenue = await _orders_in_period(db, period)
        series.append(WeeklySales(
            week=week_label(period[0]),
            orders=orders,
            revenue=revenue,
        ))
    return series


@dashboard_metric("recent orders")
async def get_recent_orders(
    db: AsyncSession,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[RecentOrder]:
    """The most recent customer orders by order date"""
    limit = resolve_limit(limit)
    if limit == 0:
        return []

    result = await db.execute(
        select(
            CustomerOrder.id,
            CustomerOrder.order_number,
            CustomerOrder.order_date,
            CustomerOrder.total_amount,
            CustomerOrder.status,
            Customer.name.label("customer_name"),
        )
        .join(Customer, CustomerOrder.customer_id == Customer.id)
        .order_by(CustomerOrder.order_date.desc())
        .limit(limit)
    )

    return [
        RecentOrder(
            id=row.id,
            order_number=row.order_number,
            customer_name=row.customer_name,
            date=row.order_date,
            amount=to_decimal(row.total_amount),
            status=row.status,
        )
        for row in result
    ]
