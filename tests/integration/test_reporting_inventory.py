"""
Integration Tests - Stock Alerts
"""
from datetime import datetime
from decimal import Decimal

from mfg_dashboard.database.models import RecordStatus
from mfg_dashboard.reporting.calculations import StockStatus
from mfg_dashboard.reporting.inventory import get_inventory_alerts, get_material_alerts


class TestInventoryAlerts:
    """Tests for get_inventory_alerts"""

    async def test_classifies_and_orders_low_stock_products(self, db, seed, factory, now):
        customer = factory.customer()
        order = factory.order(customer)

        no_sales = factory.product(name="A", current_stock=8, minimum_stock_level=10)
        warning = factory.product(name="B", current_stock=12, minimum_stock_level=10)
        healthy = factory.product(name="C", current_stock=13, minimum_stock_level=10)
        fast_moving = factory.product(name="D", current_stock=5, minimum_stock_level=10)
        inactive = factory.product(
            name="E", current_stock=1, minimum_stock_level=10, status=RecordStatus.INACTIVE
        )

        await seed(
            customer,
            order,
            no_sales,
            warning,
            healthy,
            fast_moving,
            inactive,
            factory.line(order, warning, 45, "20.00", created_at=datetime(2026, 10, 1)),
            factory.line(order, fast_moving, 30, "20.00", created_at=datetime(2026, 10, 10)),
            # outside the consumption window
            factory.line(order, fast_moving, 100, "20.00", created_at=datetime(2026, 8, 1)),
        )

        alerts = await get_inventory_alerts(db, now=now)

        assert [a.name for a in alerts] == ["D", "A", "B"]

        d, a, b = alerts
        assert d.status == StockStatus.CRITICAL
        assert d.days_until_stockout == 5
        assert a.status == StockStatus.CRITICAL
        assert a.days_until_stockout is None
        assert b.status == StockStatus.WARNING
        assert b.days_until_stockout == 8
        assert b.sku == warning.sku
        assert b.lead_time == 7

    async def test_no_low_stock(self, db, seed, factory, now):
        await seed(factory.product(current_stock=500))

        assert await get_inventory_alerts(db, now=now) == []

    async def test_database_failure_returns_empty_list(self, broken_session, now):
        assert await get_inventory_alerts(broken_session, now=now) == []


class TestMaterialAlerts:
    """Tests for get_material_alerts"""

    async def test_consumption_follows_bill_of_materials(self, db, seed, factory, now):
        customer = factory.customer()
        order = factory.order(customer)
        product = factory.product()

        at_minimum = factory.material(name="M1", current_stock=100, minimum_stock_level=100)
        near_minimum = factory.material(name="M2", current_stock=115, minimum_stock_level=100)
        plenty = factory.material(name="M3", current_stock=500, minimum_stock_level=100)

        await seed(
            customer,
            order,
            product,
            at_minimum,
            near_minimum,
            plenty,
            factory.bom(product, at_minimum, quantity_needed=Decimal("2.5")),
            factory.bom(product, plenty, quantity_needed=Decimal("1")),
            factory.line(order, product, 12, "20.00", created_at=datetime(2026, 10, 1)),
        )

        alerts = await get_material_alerts(db, now=now)

        assert [a.name for a in alerts] == ["M1", "M2"]
        m1, m2 = alerts
        # 2.5 per unit * 12 units = 30 consumed over 30 days
        assert m1.status == StockStatus.CRITICAL
        assert m1.days_until_stockout == 100
        assert m2.status == StockStatus.WARNING
        assert m2.days_until_stockout is None

    async def test_inactive_materials_are_ignored(self, db, seed, factory, now):
        await seed(factory.material(current_stock=0, status=RecordStatus.INACTIVE))

        assert await get_material_alerts(db, now=now) == []

    async def test_database_failure_returns_empty_list(self, broken_session, now):
        assert await get_material_alerts(broken_session, now=now) == []
