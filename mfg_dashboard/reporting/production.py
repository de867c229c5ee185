"""
Production Metrics

Production order status breakdown, work center efficiency and material
utilization with wastage cost.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

import structlog
from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from mfg_dashboard.config import get_settings
from mfg_dashboard.database.models import (
    BillOfMaterial,
    Material,
    Operation,
    OperationStatus,
    OrderStatus,
    ProductionOrder,
    RecordStatus,
    WorkCenter,
)
from mfg_dashboard.reporting.calculations import HUNDRED, ZERO, percentage, to_decimal
from mfg_dashboard.reporting.instrumentation import dashboard_metric
from mfg_dashboard.reporting.periods import hours_between, resolve_now, subtract_months
from mfg_dashboard.reporting.schemas import (
    MaterialUtilization,
    ProductionEfficiency,
    ProductionStatus,
)

logger = structlog.get_logger(__name__)


@dashboard_metric("production status")
async def get_production_status(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> ProductionStatus:
    """Counts of all production orders by status"""
    result = await db.execute(
        select(ProductionOrder.status, func.count().label("orders"))
        .group_by(ProductionOrder.status)
    )
    by_status = {row.status: row.orders for row in result}

    pending = by_status.get(OrderStatus.PENDING, 0)
    in_progress = by_status.get(OrderStatus.IN_PROGRESS, 0)
    completed = by_status.get(OrderStatus.COMPLETED, 0)
    total = sum(by_status.values())

    return ProductionStatus(
        total_orders=total,
        pending_orders=pending,
        in_progress_orders=in_progress,
        completed_orders=completed,
        pending_percentage=percentage(pending, total),
        in_progress_percentage=percentage(in_progress, total),
        completed_percentage=percentage(completed, total),
    )


@dashboard_metric("production efficiency")
async def get_production_efficiency(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> List[ProductionEfficiency]:
    """
    Planned versus actual output per active work center.

    Planned output is capacity per hour times the hours booked by operations
    created in the window. Actual output counts the parent order quantity of
    completed operations only.
    """
    config = get_settings().dashboard
    now = resolve_now(now)
    since = subtract_months(now, config.efficiency_window_months)

    result = await db.execute(
        select(
            WorkCenter.id,
            WorkCenter.name,
            WorkCenter.capacity_per_hour,
            Operation.start_time,
            Operation.end_time,
            Operation.status,
            Operation.cost,
            ProductionOrder.quantity,
        )
        .join(Operation, Operation.work_center_id == WorkCenter.id)
        .join(ProductionOrder, Operation.production_order_id == ProductionOrder.id)
        .where(
            and_(
                WorkCenter.status == RecordStatus.ACTIVE,
                Operation.created_at >= since,
            )
        )
    )

    totals: Dict = {}
    for row in result:
        entry = totals.setdefault(row.id, {
            "name": row.name,
            "capacity": row.capacity_per_hour or 0.0,
            "hours": 0.0,
            "actual": 0,
            "cost": ZERO,
        })
        entry["hours"] += hours_between(row.start_time, row.end_time)
        entry["cost"] += to_decimal(row.cost)
        if row.status == OperationStatus.COMPLETED:
            entry["actual"] += row.quantity

    centers = []
    for work_center_id, entry in totals.items():
        planned = entry["capacity"] * entry["hours"]
        centers.append(ProductionEfficiency(
            work_center_id=work_center_id,
            work_center_name=entry["name"],
            planned_output=planned,
            actual_output=entry["actual"],
            efficiency=percentage(entry["actual"], planned),
            cost=entry["cost"],
        ))
    centers.sort(key=lambda c: c.efficiency, reverse=True)
    return centers


@dashboard_metric("material utilization")
async def get_material_utilization(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> List[MaterialUtilization]:
    """
    Planned and actual material use of completed production, with wastage cost.

    Actual use applies each bill of materials entry's waste percentage on top
    of the planned quantity.
    """
    config = get_settings().dashboard
    now = resolve_now(now)
    since = subtract_months(now, config.utilization_window_months)

    material_result = await db.execute(
        select(Material.id, Material.name, Material.cost_per_unit)
        .where(
            and_(
                Material.status == RecordStatus.ACTIVE,
                Material.boms.any(),
            )
        )
        .order_by(Material.name)
    )
    materials = material_result.all()
    if not materials:
        return []

    bom_result = await db.execute(
        select(
            BillOfMaterial.material_id,
            BillOfMaterial.product_id,
            BillOfMaterial.quantity_needed,
            BillOfMaterial.waste_percentage,
        ).where(BillOfMaterial.material_id.in_([m.id for m in materials]))
    )
    boms = bom_result.all()

    produced_result = await db.execute(
        select(
            ProductionOrder.product_id,
            func.sum(ProductionOrder.quantity).label("quantity"),
        )
        .where(
            and_(
                ProductionOrder.status == OrderStatus.COMPLETED,
                ProductionOrder.created_at >= since,
                ProductionOrder.product_id.in_(list({bom.product_id for bom in boms})),
            )
        )
        .group_by(ProductionOrder.product_id)
    )
    produced = {row.product_id: int(row.quantity or 0) for row in produced_result}

    planned: Dict = defaultdict(lambda: ZERO)
    actual: Dict = defaultdict(lambda: ZERO)
    for bom in boms:
        need = to_decimal(bom.quantity_needed) * produced.get(bom.product_id, 0)
        planned[bom.material_id] += need
        actual[bom.material_id] += need * (1 + to_decimal(bom.waste_percentage) / HUNDRED)

    utilization = []
    for material in materials:
        material_planned: Decimal = planned[material.id]
        material_actual: Decimal = actual[material.id]
        wastage = material_actual - material_planned
        utilization.append(MaterialUtilization(
            material_id=material.id,
            material_name=material.name,
            planned=float(material_planned),
            actual=float(material_actual),
            wastage=float(wastage),
            wastage_percentage=percentage(wastage, material_planned),
            cost_impact=wastage * to_decimal(material.cost_per_unit),
        ))
    utilization.sort(key=lambda m: m.cost_impact, reverse=True)
    return utilization
