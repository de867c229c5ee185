"""
Operational Alerts

Six independent counts of items that need attention. Each count runs in its
own failure boundary: a failing count is logged, reported as 0 and the
session is rolled back so the remaining counts can still run.
"""

from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy import func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from mfg_dashboard.config import get_settings
from mfg_dashboard.database.models import (
    CustomerOrder,
    Material,
    OrderStatus,
    Product,
    ProductionOrder,
    PurchaseOrder,
    PurchaseOrderStatus,
    QualityCheck,
)
from mfg_dashboard.reporting.instrumentation import METRIC_DURATION, record_failure
from mfg_dashboard.reporting.inventory import low_stock_rows
from mfg_dashboard.reporting.periods import resolve_now, subtract_months
from mfg_dashboard.reporting.queries import count_rows
from mfg_dashboard.reporting.schemas import OperationalAlerts

logger = structlog.get_logger(__name__)

OPEN_ORDER_STATUSES = (OrderStatus.PENDING, OrderStatus.IN_PROGRESS)


async def count_product_stock_alerts(db: AsyncSession, now: datetime) -> int:
    rows = await low_stock_rows(db, Product, get_settings().dashboard.stock_alert_factor)
    return len(rows)


async def count_material_stock_alerts(db: AsyncSession, now: datetime) -> int:
    rows = await low_stock_rows(db, Material, get_settings().dashboard.stock_alert_factor)
    return len(rows)


async def count_late_production_orders(db: AsyncSession, now: datetime) -> int:
    return await count_rows(
        db,
        ProductionOrder,
        ProductionOrder.due_date < now,
        ProductionOrder.status.in_(OPEN_ORDER_STATUSES),
    )


async def count_quality_issues(db: AsyncSession, now: datetime) -> int:
    since = subtract_months(now, get_settings().dashboard.quality_issue_window_months)
    return await count_rows(
        db,
        QualityCheck,
        QualityCheck.check_date >= since,
        QualityCheck.defects_found.is_not(None),
        func.trim(QualityCheck.defects_found) != "",
    )


async def count_late_deliveries(db: AsyncSession, now: datetime) -> int:
    return await count_rows(
        db,
        CustomerOrder,
        and_(
            CustomerOrder.required_date < now,
            CustomerOrder.status.in_(OPEN_ORDER_STATUSES),
        ),
    )


async def count_pending_approvals(db: AsyncSession, now: datetime) -> int:
    return await count_rows(
        db, PurchaseOrder, PurchaseOrder.status == PurchaseOrderStatus.PENDING
    )


async def _reset_session(db: AsyncSession) -> None:
    """Roll back after a failed count; a failing rollback is only logged"""
    try:
        await db.rollback()
    except Exception as e:
        logger.warning("Session rollback failed", error=str(e), error_type=type(e).__name__)


async def get_operational_alerts(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> OperationalAlerts:
    """
    Count open issues across inventory, production, quality and purchasing.

    Never raises for a failing count: that count is reported as 0.
    """
    now = resolve_now(now)
    counters = (
        ("product_stock_alerts", count_product_stock_alerts),
        ("material_stock_alerts", count_material_stock_alerts),
        ("late_production_orders", count_late_production_orders),
        ("quality_issues", count_quality_issues),
        ("late_deliveries", count_late_deliveries),
        ("pending_approvals", count_pending_approvals),
    )

    counts = {}
    with METRIC_DURATION.labels(metric="operational alerts").time():
        for field, counter in counters:
            try:
                counts[field] = await counter(db, now)
            except Exception as e:
                record_failure(f"operational alerts: {field}", "zero", e)
                await _reset_session(db)
                counts[field] = 0

    logger.debug("Operational alerts computed", **counts)
    return OperationalAlerts(**counts)
