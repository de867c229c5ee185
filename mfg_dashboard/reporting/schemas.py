"""
Dashboard Result Models

Plain pydantic models returned by the reporting functions. Money is carried
as Decimal (serialized to JSON strings) except where a metric's contract is
an explicit fixed-point string (DashboardStats.total_revenue and
MonthlySales.revenue).
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from mfg_dashboard.database.models import OrderStatus
from mfg_dashboard.reporting.calculations import StockStatus


class DashboardStats(BaseModel):
    """Headline counters with month-over-month growth"""
    total_revenue: str
    total_products: int
    active_orders: int
    total_users: int
    revenue_growth: str
    products_growth: str
    orders_growth: str
    users_growth: str


class StockAlert(BaseModel):
    """Item at or near its minimum stock level"""
    id: UUID
    sku: str
    name: str
    current_stock: int
    minimum_stock_level: int
    lead_time: int
    days_until_stockout: Optional[int]
    status: StockStatus


class InventoryAlert(StockAlert):
    """Low-stock finished product"""


class MaterialAlert(StockAlert):
    """Low-stock raw material"""


class ProductPerformance(BaseModel):
    id: UUID
    name: str
    sku: str
    sales_count: int
    revenue: Decimal
    profit: Decimal
    profit_margin: float


class SupplierPerformance(BaseModel):
    id: UUID
    name: str
    code: str
    orders_count: int
    on_time_delivery_rate: float
    average_lead_time: float
    total_spent: Decimal


class ProductionStatus(BaseModel):
    total_orders: int
    pending_orders: int
    in_progress_orders: int
    completed_orders: int
    pending_percentage: float
    in_progress_percentage: float
    completed_percentage: float


class CategorySales(BaseModel):
    category_id: UUID
    category_name: str
    sales_count: int
    revenue: Decimal
    percentage: float


class MonthlySales(BaseModel):
    """One calendar month; revenue is a two-digit fixed-point string"""
    month: str
    year: int
    orders: int
    revenue: str


class WeeklySales(BaseModel):
    """One Sunday-based week; revenue stays a Decimal"""
    week: str
    orders: int
    revenue: Decimal


class RecentOrder(BaseModel):
    id: UUID
    order_number: str
    customer_name: str
    date: datetime
    amount: Decimal
    status: OrderStatus


class DefectFrequency(BaseModel):
    defect: str
    count: int
    percentage: float


class QualityMetrics(BaseModel):
    total_checks: int
    pass_rate: float
    fail_rate: float
    top_defects: List[DefectFrequency]


class ProductionEfficiency(BaseModel):
    work_center_id: UUID
    work_center_name: str
    planned_output: float
    actual_output: int
    efficiency: float
    cost: Decimal


class MaterialUtilization(BaseModel):
    material_id: UUID
    material_name: str
    planned: float
    actual: float
    wastage: float
    wastage_percentage: float
    cost_impact: Decimal


class CustomerInsights(BaseModel):
    id: UUID
    name: str
    total_orders: int
    total_spent: Decimal
    average_order_value: Decimal
    last_order_date: datetime


class OperationalAlerts(BaseModel):
    """Counts of items needing attention; a count that fails reports 0"""
    product_stock_alerts: int = 0
    material_stock_alerts: int = 0
    late_production_orders: int = 0
    quality_issues: int = 0
    late_deliveries: int = 0
    pending_approvals: int = 0


class DashboardData(BaseModel):
    """Combined payload of every dashboard metric"""
    stats: DashboardStats
    inventory_alerts: List[InventoryAlert]
    material_alerts: List[MaterialAlert]
    top_products: List[ProductPerformance]
    top_suppliers: List[SupplierPerformance]
    production_status: ProductionStatus
    sales_by_category: List[CategorySales]
    monthly_sales: List[MonthlySales]
    weekly_sales: List[WeeklySales]
    recent_orders: List[RecentOrder]
    quality_metrics: QualityMetrics
    production_efficiency: List[ProductionEfficiency]
    material_utilization: List[MaterialUtilization]
    top_customers: List[CustomerInsights]
    operational_alerts: OperationalAlerts
