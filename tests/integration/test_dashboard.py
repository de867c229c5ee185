"""
Integration Tests - Dashboard Orchestrator and Seeding
"""
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from mfg_dashboard.data.generators import DataGenerator
from mfg_dashboard.database.models import CustomerOrder, Product
from mfg_dashboard.ingestion.seed_db import seed_dataset
from mfg_dashboard.reporting import dashboard
from mfg_dashboard.reporting.dashboard import get_dashboard_data
from mfg_dashboard.reporting.exceptions import DashboardQueryError
from mfg_dashboard.reporting.schemas import DashboardData


class TestGetDashboardData:
    """Tests for get_dashboard_data"""

    async def test_empty_store(self, session_factory, now):
        data = await get_dashboard_data(session_factory, now=now)

        assert data.stats.total_revenue == "0.00"
        assert data.inventory_alerts == []
        assert data.top_products == []
        assert len(data.monthly_sales) == 12
        assert len(data.weekly_sales) == 8
        assert data.quality_metrics.total_checks == 0
        assert data.operational_alerts.pending_approvals == 0

    async def test_payload_survives_json_round_trip(self, session_factory, seed, factory, now):
        customer = factory.customer()
        product = factory.product(current_stock=5)
        order = factory.order(customer, total_amount=Decimal("40.00"))
        await seed(customer, product, order, factory.line(order, product, 2, "20.00"))

        data = await get_dashboard_data(session_factory, now=now)

        assert DashboardData.model_validate_json(data.model_dump_json()) == data

    async def test_metrics_share_reference_instant(self, session_factory, seed, factory):
        customer = factory.customer()
        await seed(customer, factory.order(customer, order_date=datetime(2024, 2, 7)))

        data = await get_dashboard_data(session_factory, now=datetime(2024, 2, 10, 9))

        assert data.monthly_sales[-1].month == "Feb"
        assert data.monthly_sales[-1].orders == 1
        assert data.weekly_sales[-1].week == "Feb 4 - Feb 10"
        assert data.weekly_sales[-1].orders == 1

    async def test_failing_metric_aborts_payload(self, session_factory, now, monkeypatch):
        async def broken(db, now=None):
            raise DashboardQueryError("Failed to fetch quality metrics", metric="quality metrics")

        monkeypatch.setattr(dashboard, "get_quality_metrics", broken)

        with pytest.raises(DashboardQueryError, match="Failed to fetch dashboard data") as excinfo:
            await get_dashboard_data(session_factory, now=now)

        assert isinstance(excinfo.value.__cause__, DashboardQueryError)

    async def test_unreachable_database(self, broken_session_factory, now):
        with pytest.raises(DashboardQueryError, match="Failed to fetch dashboard data"):
            await get_dashboard_data(broken_session_factory, now=now)


class TestSeedDataset:
    """Tests for loading generated data"""

    async def test_generated_dataset_feeds_dashboard(self, session_factory, now):
        data = DataGenerator(seed=5).generate_all(
            n_products=15,
            n_customers=8,
            n_orders=60,
            n_suppliers=4,
            n_purchase_orders=20,
            n_production_orders=25,
            n_users=3,
            now=now,
        )

        await seed_dataset(session_factory, data)

        async with session_factory() as db:
            products = (await db.execute(select(func.count()).select_from(Product))).scalar_one()
            orders = (await db.execute(select(func.count()).select_from(CustomerOrder))).scalar_one()
        assert products == 15
        assert orders == 60

        dashboard_data = await get_dashboard_data(session_factory, now=now)

        assert dashboard_data.stats.total_products == 15
        assert dashboard_data.stats.total_users == 3
        assert sum(m.orders for m in dashboard_data.monthly_sales) <= 60
        assert dashboard_data.production_status.total_orders == 25
        assert len(dashboard_data.top_products) <= 5
        assert len(dashboard_data.recent_orders) == 5
