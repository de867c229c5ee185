"""
Stock Alerts

Low-stock products and raw materials with an estimated days-to-stockout.
Both alert lists degrade to an empty list when the data store fails.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, TypeVar
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mfg_dashboard.config import get_settings
from mfg_dashboard.database.models import BillOfMaterial, Material, Product, RecordStatus
from mfg_dashboard.reporting.calculations import (
    StockStatus,
    ZERO,
    classify_stock,
    days_until_stockout,
    is_low_stock,
    to_decimal,
)
from mfg_dashboard.reporting.instrumentation import dashboard_metric
from mfg_dashboard.reporting.periods import resolve_now, subtract_months
from mfg_dashboard.reporting.queries import product_consumption
from mfg_dashboard.reporting.schemas import InventoryAlert, MaterialAlert, StockAlert

logger = structlog.get_logger(__name__)

AlertT = TypeVar("AlertT", bound=StockAlert)


def sort_stock_alerts(alerts: Sequence[AlertT]) -> List[AlertT]:
    """CRITICAL first, then soonest stockout; unknown stockout dates last"""
    return sorted(
        alerts,
        key=lambda a: (
            0 if a.status == StockStatus.CRITICAL else 1,
            a.days_until_stockout is None,
            a.days_until_stockout or 0,
        ),
    )


async def low_stock_rows(db: AsyncSession, model, factor: Decimal) -> list:
    result = await db.execute(
        select(
            model.id,
            model.sku,
            model.name,
            model.current_stock,
            model.minimum_stock_level,
            model.lead_time,
        ).where(model.status == RecordStatus.ACTIVE)
    )
    return [
        row for row in result
        if is_low_stock(row.current_stock, row.minimum_stock_level, factor)
    ]


def _build_alerts(alert_cls, rows, consumed: Dict[UUID, Decimal], factor: Decimal, period_days: int):
    return sort_stock_alerts([
        alert_cls(
            id=row.id,
            sku=row.sku,
            name=row.name,
            current_stock=row.current_stock,
            minimum_stock_level=row.minimum_stock_level,
            lead_time=row.lead_time,
            days_until_stockout=days_until_stockout(
                row.current_stock, consumed.get(row.id, ZERO), period_days
            ),
            status=classify_stock(row.current_stock, row.minimum_stock_level, factor),
        )
        for row in rows
    ])


@dashboard_metric("inventory alerts", fallback=list)
async def get_inventory_alerts(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> List[InventoryAlert]:
    """Active products at or below minimum stock * alert factor"""
    config = get_settings().dashboard
    now = resolve_now(now)
    factor = config.stock_alert_factor

    rows = await low_stock_rows(db, Product, factor)
    if not rows:
        return []

    since = subtract_months(now, config.consumption_window_months)
    sold = await product_consumption(db, since, [row.id for row in rows])
    consumed = {product_id: Decimal(qty) for product_id, qty in sold.items()}

    alerts = _build_alerts(InventoryAlert, rows, consumed, factor, config.consumption_days)
    logger.debug("Inventory alerts computed", count=len(alerts))
    return alerts


@dashboard_metric("material alerts", fallback=list)
async def get_material_alerts(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> List[MaterialAlert]:
    """
    Active materials at or below minimum stock * alert factor.

    Material consumption is derived from recent sales of every product whose
    bill of materials uses the material, weighted by the quantity needed per
    unit of product.
    """
    config = get_settings().dashboard
    now = resolve_now(now)
    factor = config.stock_alert_factor

    rows = await low_stock_rows(db, Material, factor)
    if not rows:
        return []

    bom_result = await db.execute(
        select(
            BillOfMaterial.material_id,
            BillOfMaterial.product_id,
            BillOfMaterial.quantity_needed,
        ).where(BillOfMaterial.material_id.in_([row.id for row in rows]))
    )
    boms = bom_result.all()

    since = subtract_months(now, config.consumption_window_months)
    sold = await product_consumption(db, since, {bom.product_id for bom in boms})

    consumed: Dict[UUID, Decimal] = defaultdict(lambda: ZERO)
    for bom in boms:
        consumed[bom.material_id] += to_decimal(bom.quantity_needed) * sold.get(bom.product_id, 0)

    alerts = _build_alerts(MaterialAlert, rows, consumed, factor, config.consumption_days)
    logger.debug("Material alerts computed", count=len(alerts))
    return alerts
