"""
Customer Insights
"""

from datetime import datetime
from typing import Dict, List, Optional

import structlog
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from mfg_dashboard.config import get_settings
from mfg_dashboard.database.models import Customer, CustomerOrder, RecordStatus
from mfg_dashboard.reporting.calculations import ZERO, to_decimal
from mfg_dashboard.reporting.instrumentation import dashboard_metric
from mfg_dashboard.reporting.periods import resolve_now, subtract_months
from mfg_dashboard.reporting.sales import resolve_limit
from mfg_dashboard.reporting.schemas import CustomerInsights

logger = structlog.get_logger(__name__)


@dashboard_metric("top customers")
async def get_top_customers(
    db: AsyncSession,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[CustomerInsights]:
    """
    Active customers ranked by lifetime spend.

    Only customers with at least one order created in the activity window
    are eligible, but their totals cover every order they have placed.
    """
    config = get_settings().dashboard
    now = resolve_now(now)
    limit = resolve_limit(limit)
    since = subtract_months(now, config.customer_window_months)

    recently_active = (
        select(CustomerOrder.customer_id)
        .where(CustomerOrder.created_at >= since)
    )

    result = await db.execute(
        select(
            Customer.id,
            Customer.name,
            CustomerOrder.order_date,
            CustomerOrder.total_amount,
        )
        .join(CustomerOrder, CustomerOrder.customer_id == Customer.id)
        .where(
            and_(
                Customer.status == RecordStatus.ACTIVE,
                Customer.id.in_(recently_active),
            )
        )
    )

    totals: Dict = {}
    for row in result:
        entry = totals.setdefault(row.id, {
            "name": row.name,
            "orders": 0,
            "spent": ZERO,
            "last_order": None,
        })
        entry["orders"] += 1
        entry["spent"] += to_decimal(row.total_amount)
        if entry["last_order"] is None or row.order_date > entry["last_order"]:
            entry["last_order"] = row.order_date

    insights = [
        CustomerInsights(
            id=customer_id,
            name=entry["name"],
            total_orders=entry["orders"],
            total_spent=entry["spent"],
            average_order_value=entry["spent"] / entry["orders"] if entry["orders"] else ZERO,
            last_order_date=entry["last_order"] or now,
        )
        for customer_id, entry in totals.items()
    ]
    insights.sort(key=lambda c: c.total_spent, reverse=True)

    logger.debug("Top customers computed", eligible=len(insights), limit=limit)
    return insights[:limit]
