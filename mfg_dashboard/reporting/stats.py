"""
Headline Statistics

Revenue, catalogue, order and user totals with month-over-month growth.
"""

from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from mfg_dashboard.database.models import (
    CustomerOrder,
    OrderStatus,
    Product,
    Transaction,
    TransactionStatus,
    User,
)
from mfg_dashboard.reporting.calculations import format_growth, format_money
from mfg_dashboard.reporting.instrumentation import dashboard_metric
from mfg_dashboard.reporting.periods import previous_month_bounds, resolve_now, start_of_month
from mfg_dashboard.reporting.queries import count_rows, sum_column
from mfg_dashboard.reporting.schemas import DashboardStats

logger = structlog.get_logger(__name__)

ACTIVE_ORDER_STATUSES = (OrderStatus.PENDING, OrderStatus.IN_PROGRESS)


@dashboard_metric("dashboard stats")
async def get_stats(db: AsyncSession, now: Optional[datetime] = None) -> DashboardStats:
    """
    Current totals compared against the previous calendar month.

    Revenue growth compares all completed transactions to those of the
    previous month. Product, order and user growth compare the current
    totals to the totals that existed before the current month started.
    """
    now = resolve_now(now)
    month_start = start_of_month(now)
    prev_start, prev_end = previous_month_bounds(now)

    total_revenue = await sum_column(
        db, Transaction.amount, Transaction.status == TransactionStatus.COMPLETED
    )
    total_products = await count_rows(db, Product)
    active_orders = await count_rows(
        db, CustomerOrder, CustomerOrder.status.in_(ACTIVE_ORDER_STATUSES)
    )
    total_users = await count_rows(db, User)

    prev_revenue = await sum_column(
        db,
        Transaction.amount,
        Transaction.status == TransactionStatus.COMPLETED,
        Transaction.created_at >= prev_start,
        Transaction.created_at < prev_end,
    )
    prev_products = await count_rows(db, Product, Product.created_at < month_start)
    prev_orders = await count_rows(
        db,
        CustomerOrder,
        CustomerOrder.status.in_(ACTIVE_ORDER_STATUSES),
        CustomerOrder.created_at < month_start,
    )
    prev_users = await count_rows(db, User, User.created_at < month_start)

    logger.debug(
        "Dashboard stats computed",
        total_revenue=str(total_revenue),
        total_products=total_products,
        active_orders=active_orders,
        total_users=total_users,
    )

    return DashboardStats(
        total_revenue=format_money(total_revenue),
        total_products=total_products,
        active_orders=active_orders,
        total_users=total_users,
        revenue_growth=format_growth(total_revenue, prev_revenue),
        products_growth=format_growth(total_products, prev_products),
        orders_growth=format_growth(active_orders, prev_orders),
        users_growth=format_growth(total_users, prev_users),
    )
