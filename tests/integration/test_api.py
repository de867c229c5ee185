"""
Integration Tests - Dashboard API
"""
import pytest
from httpx import ASGITransport, AsyncClient

from mfg_dashboard.database.connection import get_db_dependency
from mfg_dashboard.database.models import OrderStatus
from mfg_dashboard.main import app
from mfg_dashboard.serving.api.routes.dashboard import get_dashboard_session_factory


@pytest.fixture
def override_database():
    """Point the API's session dependencies at a test session factory"""
    def _override(session_factory):
        async def _db():
            async with session_factory() as session:
                yield session

        app.dependency_overrides[get_db_dependency] = _db
        app.dependency_overrides[get_dashboard_session_factory] = lambda: session_factory

    yield _override
    app.dependency_overrides.clear()


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class TestDashboardEndpoint:
    """Tests for GET /api/v1/dashboard/"""

    async def test_full_payload(self, client, override_database, session_factory):
        override_database(session_factory)

        response = await client.get("/api/v1/dashboard/")

        assert response.status_code == 200
        body = response.json()
        assert body["stats"]["total_revenue"] == "0.00"
        assert len(body["monthly_sales"]) == 12
        assert len(body["weekly_sales"]) == 8
        assert set(body["operational_alerts"]) == {
            "product_stock_alerts",
            "material_stock_alerts",
            "late_production_orders",
            "quality_issues",
            "late_deliveries",
            "pending_approvals",
        }
        assert response.headers["Cache-Control"] == "no-store"

    async def test_unavailable_database(self, client, override_database, broken_session_factory):
        override_database(broken_session_factory)

        response = await client.get("/api/v1/dashboard/")

        assert response.status_code == 503
        assert response.json() == {"detail": "Failed to fetch dashboard data"}


class TestMetricEndpoints:
    """Tests for the per-metric endpoints"""

    async def test_production_status(self, client, override_database, session_factory, seed, factory):
        product = factory.product()
        await seed(
            product,
            factory.production_order(product, status=OrderStatus.PENDING),
            factory.production_order(product, status=OrderStatus.COMPLETED),
        )
        override_database(session_factory)

        response = await client.get("/api/v1/dashboard/production-status")

        assert response.status_code == 200
        body = response.json()
        assert body["total_orders"] == 2
        assert body["pending_percentage"] == 50.0

    async def test_top_products_limit_is_validated(self, client, override_database, session_factory):
        override_database(session_factory)

        assert (await client.get("/api/v1/dashboard/top-products?limit=3")).status_code == 200
        assert (await client.get("/api/v1/dashboard/top-products?limit=0")).status_code == 422
        assert (await client.get("/api/v1/dashboard/top-products?limit=101")).status_code == 422

    async def test_fail_fast_metric_returns_503(self, client, override_database, broken_session_factory):
        override_database(broken_session_factory)

        response = await client.get("/api/v1/dashboard/stats")

        assert response.status_code == 503
        assert response.json() == {"detail": "Failed to fetch dashboard stats"}

    async def test_stock_alerts_degrade_to_empty(self, client, override_database, broken_session_factory):
        override_database(broken_session_factory)

        for path in ("/api/v1/dashboard/inventory-alerts", "/api/v1/dashboard/material-alerts"):
            response = await client.get(path)
            assert response.status_code == 200
            assert response.json() == []

    async def test_operational_alerts_degrade_to_zero(self, client, override_database, broken_session_factory):
        override_database(broken_session_factory)

        response = await client.get("/api/v1/dashboard/operational-alerts")

        assert response.status_code == 200
        assert set(response.json().values()) == {0}


class TestServiceEndpoints:
    """Tests for health, info and metrics endpoints"""

    async def test_liveness(self, client):
        response = await client.get("/api/v1/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    async def test_info(self, client):
        response = await client.get("/api/v1/info")

        assert response.status_code == 200
        assert response.json()["name"] == "Manufacturing Dashboard API"

    async def test_metrics_exposes_metric_timings(self, client, override_database, session_factory):
        override_database(session_factory)
        await client.get("/api/v1/dashboard/stats")

        response = await client.get("/metrics/")

        assert response.status_code == 200
        assert "mfg_dashboard_metric_duration_seconds" in response.text

    async def test_health_reports_missing_database(self, client):
        """The global engine is never initialized under test"""
        response = await client.get("/api/v1/health")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["checks"]["database"]["error_type"] == "DatabaseNotInitializedError"

    async def test_readiness_reports_missing_database(self, client):
        response = await client.get("/api/v1/health/ready")

        assert response.status_code == 503
        assert response.json() == {"status": "not_ready", "reason": "database_unavailable"}

    async def test_dashboard_without_database_is_unavailable(self, client):
        response = await client.get("/api/v1/dashboard/stats")

        assert response.status_code == 503
        assert response.json() == {"detail": "Database unavailable"}
