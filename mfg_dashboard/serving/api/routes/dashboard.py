"""
Dashboard API Endpoints

REST API exposing the combined dashboard payload and each metric on its own.
Every response is computed fresh from the data store.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from mfg_dashboard.database.connection import get_db_dependency, get_session_factory
from mfg_dashboard.reporting import (
    get_dashboard_data,
    get_inventory_alerts,
    get_material_alerts,
    get_material_utilization,
    get_monthly_sales,
    get_operational_alerts,
    get_production_efficiency,
    get_production_status,
    get_quality_metrics,
    get_recent_orders,
    get_sales_by_category,
    get_stats,
    get_supplier_performance,
    get_top_customers,
    get_top_performing_products,
    get_weekly_sales,
)
from mfg_dashboard.reporting.schemas import (
    CategorySales,
    CustomerInsights,
    DashboardData,
    DashboardStats,
    InventoryAlert,
    MaterialAlert,
    MaterialUtilization,
    MonthlySales,
    OperationalAlerts,
    ProductionEfficiency,
    ProductionStatus,
    ProductPerformance,
    QualityMetrics,
    RecentOrder,
    SupplierPerformance,
    WeeklySales,
)

router = APIRouter()
logger = structlog.get_logger(__name__)


def get_dashboard_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for the concurrent dashboard fan-out"""
    return get_session_factory()


@router.get("/", response_model=DashboardData)
async def read_dashboard(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_dashboard_session_factory),
) -> DashboardData:
    """
    Get every dashboard metric in one payload.

    Fails with 503 if any metric cannot be computed.
    """
    logger.info("read_dashboard called")
    return await get_dashboard_data(session_factory)


@router.get("/stats", response_model=DashboardStats)
async def read_stats(db: AsyncSession = Depends(get_db_dependency)) -> DashboardStats:
    return await get_stats(db)


@router.get("/inventory-alerts", response_model=List[InventoryAlert])
async def read_inventory_alerts(
    db: AsyncSession = Depends(get_db_dependency),
) -> List[InventoryAlert]:
    return await get_inventory_alerts(db)


@router.get("/material-alerts", response_model=List[MaterialAlert])
async def read_material_alerts(
    db: AsyncSession = Depends(get_db_dependency),
) -> List[MaterialAlert]:
    return await get_material_alerts(db)


@router.get("/top-products", response_model=List[ProductPerformance])
async def read_top_products(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Number of entries to return"),
    db: AsyncSession = Depends(get_db_dependency),
) -> List[ProductPerformance]:
    return await get_top_performing_products(db, limit=limit)


@router.get("/top-suppliers", response_model=List[SupplierPerformance])
async def read_top_suppliers(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Number of entries to return"),
    db: AsyncSession = Depends(get_db_dependency),
) -> List[SupplierPerformance]:
    return await get_supplier_performance(db, limit=limit)


@router.get("/production-status", response_model=ProductionStatus)
async def read_production_status(
    db: AsyncSession = Depends(get_db_dependency),
) -> ProductionStatus:
    return await get_production_status(db)


@router.get("/sales-by-category", response_model=List[CategorySales])
async def read_sales_by_category(
    db: AsyncSession = Depends(get_db_dependency),
) -> List[CategorySales]:
    return await get_sales_by_category(db)


@router.get("/monthly-sales", response_model=List[MonthlySales])
async def read_monthly_sales(
    db: AsyncSession = Depends(get_db_dependency),
) -> List[MonthlySales]:
    return await get_monthly_sales(db)


@router.get("/weekly-sales", response_model=List[WeeklySales])
async def read_weekly_sales(
    db: AsyncSession = Depends(get_db_dependency),
) -> List[WeeklySales]:
    return await get_weekly_sales(db)


@router.get("/recent-orders", response_model=List[RecentOrder])
async def read_recent_orders(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Number of entries to return"),
    db: AsyncSession = Depends(get_db_dependency),
) -> List[RecentOrder]:
    return await get_recent_orders(db, limit=limit)


@router.get("/quality-metrics", response_model=QualityMetrics)
async def read_quality_metrics(
    db: AsyncSession = Depends(get_db_dependency),
) -> QualityMetrics:
    return await get_quality_metrics(db)


@router.get("/production-efficiency", response_model=List[ProductionEfficiency])
async def read_production_efficiency(
    db: AsyncSession = Depends(get_db_dependency),
) -> List[ProductionEfficiency]:
    return await get_production_efficiency(db)


@router.get("/material-utilization", response_model=List[MaterialUtilization])
async def read_material_utilization(
    db: AsyncSession = Depends(get_db_dependency),
) -> List[MaterialUtilization]:
    return await get_material_utilization(db)


@router.get("/top-customers", response_model=List[CustomerInsights])
async def read_top_customers(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Number of entries to return"),
    db: AsyncSession = Depends(get_db_dependency),
) -> List[CustomerInsights]:
    return await get_top_customers(db, limit=limit)


@router.get("/operational-alerts", response_model=OperationalAlerts)
async def read_operational_alerts(
    db: AsyncSession = Depends(get_db_dependency),
) -> OperationalAlerts:
    """Alert counts; an individual count that fails is reported as 0"""
    return await get_operational_alerts(db)
