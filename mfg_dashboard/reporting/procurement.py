"""
Supplier Performance
"""

from datetime import datetime
from typing import Dict, List, Optional

import structlog
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from mfg_dashboard.config import get_settings
from mfg_dashboard.database.models import (
    PurchaseOrder,
    PurchaseOrderStatus,
    RecordStatus,
    Supplier,
)
from mfg_dashboard.reporting.calculations import ZERO, percentage, to_decimal
from mfg_dashboard.reporting.instrumentation import dashboard_metric
from mfg_dashboard.reporting.periods import resolve_now, subtract_months, whole_days_between
from mfg_dashboard.reporting.sales import resolve_limit
from mfg_dashboard.reporting.schemas import SupplierPerformance

logger = structlog.get_logger(__name__)


def is_on_time(order_date: datetime, expected_delivery: datetime) -> bool:
    """
    Delivery counted as on time.

    Only the promised date is recorded, so this checks that delivery was
    promised on or after the order date; it does not measure actual arrival.
    """
    return expected_delivery >= order_date


@dashboard_metric("supplier performance")
async def get_supplier_performance(
    db: AsyncSession,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[SupplierPerformance]:
    """
    Active suppliers with purchase orders in the trailing window, ranked by spend.

    Delivery rate and lead time are measured over COMPLETED orders only;
    spend covers every order in the window.
    """
    config = get_settings().dashboard
    now = resolve_now(now)
    limit = resolve_limit(limit)
    since = subtract_months(now, config.supplier_window_months)

    result = await db.execute(
        select(
            Supplier.id,
            Supplier.name,
            Supplier.code,
            PurchaseOrder.order_date,
            PurchaseOrder.expected_delivery,
            PurchaseOrder.status,
            PurchaseOrder.total_amount,
        )
        .join(PurchaseOrder, PurchaseOrder.supplier_id == Supplier.id)
        .where(
            and_(
                Supplier.status == RecordStatus.ACTIVE,
                PurchaseOrder.created_at >= since,
            )
        )
    )

    totals: Dict = {}
    for row in result:
        entry = totals.setdefault(row.id, {
            "name": row.name,
            "code": row.code,
            "orders": 0,
            "completed": 0,
            "on_time": 0,
            "lead_days": 0,
            "spent": ZERO,
        })
        entry["orders"] += 1
        entry["spent"] += to_decimal(row.total_amount)
        if row.status == PurchaseOrderStatus.COMPLETED:
            entry["completed"] += 1
            entry["lead_days"] += whole_days_between(row.order_date, row.expected_delivery)
            if is_on_time(row.order_date, row.expected_delivery):
                entry["on_time"] += 1

    suppliers = [
        SupplierPerformance(
            id=supplier_id,
            name=entry["name"],
            code=entry["code"],
            orders_count=entry["orders"],
            on_time_delivery_rate=percentage(entry["on_time"], entry["completed"]),
            average_lead_time=(
                entry["lead_days"] / entry["completed"] if entry["completed"] else 0.0
            ),
            total_spent=entry["spent"],
        )
        for supplier_id, entry in totals.items()
    ]
    suppliers.sort(key=lambda s: s.total_spent, reverse=True)

    logger.debug("Supplier performance computed", suppliers=len(suppliers), limit=limit)
    return suppliers[:limit]
