"""
Dashboard Orchestrator

Computes every dashboard metric concurrently and combines the results into a
single payload. Each metric runs in its own session, since an AsyncSession
cannot be shared between concurrent tasks.
"""

import asyncio
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mfg_dashboard.database.connection import get_session_factory
from mfg_dashboard.reporting.alerts import get_operational_alerts
from mfg_dashboard.reporting.customers import get_top_customers
from mfg_dashboard.reporting.exceptions import DashboardQueryError
from mfg_dashboard.reporting.inventory import get_inventory_alerts, get_material_alerts
from mfg_dashboard.reporting.periods import resolve_now
from mfg_dashboard.reporting.procurement import get_supplier_performance
from mfg_dashboard.reporting.production import (
    get_material_utilization,
    get_production_efficiency,
    get_production_status,
)
from mfg_dashboard.reporting.quality import get_quality_metrics
from mfg_dashboard.reporting.sales import (
    get_monthly_sales,
    get_recent_orders,
    get_sales_by_category,
    get_top_performing_products,
    get_weekly_sales,
)
from mfg_dashboard.reporting.schemas import DashboardData
from mfg_dashboard.reporting.stats import get_stats

logger = structlog.get_logger(__name__)


async def get_dashboard_data(
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    now: Optional[datetime] = None,
) -> DashboardData:
    """
    Build the full dashboard payload.

    All metrics share one reference instant. The first metric that fails
    aborts the whole payload with DashboardQueryError; no partial dashboard
    is returned.
    """
    session_factory = session_factory or get_session_factory()
    now = resolve_now(now)

    async def run(metric: Callable[..., Awaitable[Any]]) -> Any:
        async with session_factory() as session:
            return await metric(session, now=now)

    logger.info("Computing dashboard", now=now.isoformat())

    tasks = [
        asyncio.ensure_future(run(metric))
        for metric in (
            get_stats,
            get_inventory_alerts,
            get_material_alerts,
            get_top_performing_products,
            get_supplier_performance,
            get_production_status,
            get_sales_by_category,
            get_monthly_sales,
            get_weekly_sales,
            get_recent_orders,
            get_quality_metrics,
            get_production_efficiency,
            get_material_utilization,
            get_top_customers,
            get_operational_alerts,
        )
    ]

    try:
        (
            stats,
            inventory_alerts,
            material_alerts,
            top_products,
            top_suppliers,
            production_status,
            sales_by_category,
            monthly_sales,
            weekly_sales,
            recent_orders,
            quality_metrics,
            production_efficiency,
            material_utilization,
            top_customers,
            operational_alerts,
        ) = await asyncio.gather(*tasks)
    except Exception as e:
        # sibling metrics still hold sessions; stop them before reporting
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.error(
            "Failed to fetch dashboard data",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise DashboardQueryError("Failed to fetch dashboard data") from e

    return DashboardData(
        stats=stats,
        inventory_alerts=inventory_alerts,
        material_alerts=material_alerts,
        top_products=top_products,
        top_suppliers=top_suppliers,
        production_status=production_status,
        sales_by_category=sales_by_category,
        monthly_sales=monthly_sales,
        weekly_sales=weekly_sales,
        recent_orders=recent_orders,
        quality_metrics=quality_metrics,
        production_efficiency=production_efficiency,
        material_utilization=material_utilization,
        top_customers=top_customers,
        operational_alerts=operational_alerts,
    )
