"""
Dashboard reporting layer.

Read-only metric computations over the manufacturing data store.
"""

from mfg_dashboard.reporting.alerts import get_operational_alerts
from mfg_dashboard.reporting.customers import get_top_customers
from mfg_dashboard.reporting.dashboard import get_dashboard_data
from mfg_dashboard.reporting.exceptions import DashboardQueryError
from mfg_dashboard.reporting.inventory import get_inventory_alerts, get_material_alerts
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
from mfg_dashboard.reporting.stats import get_stats

__all__ = [
    "DashboardQueryError",
    "get_dashboard_data",
    "get_stats",
    "get_inventory_alerts",
    "get_material_alerts",
    "get_top_performing_products",
    "get_supplier_performance",
    "get_production_status",
    "get_sales_by_category",
    "get_monthly_sales",
    "get_weekly_sales",
    "get_recent_orders",
    "get_quality_metrics",
    "get_production_efficiency",
    "get_material_utilization",
    "get_top_customers",
    "get_operational_alerts",
]
