"""
Unit Tests - Metric Error Policies
"""
import pytest

from mfg_dashboard.reporting.exceptions import DashboardQueryError
from mfg_dashboard.reporting.instrumentation import METRIC_FAILURES, dashboard_metric
from mfg_dashboard.reporting.inventory import get_inventory_alerts, get_material_alerts
from mfg_dashboard.reporting.stats import get_stats


def _failures(metric: str, policy: str) -> float:
    return METRIC_FAILURES.labels(metric=metric, policy=policy)._value.get()


class TestDashboardMetric:
    """Tests for the dashboard_metric decorator"""

    async def test_passes_result_through(self):
        @dashboard_metric("answer")
        async def answer():
            return 42

        assert await answer() == 42

    async def test_fail_fast_wraps_error(self):
        @dashboard_metric("exploding metric")
        async def explode():
            raise ValueError("boom")

        before = _failures("exploding metric", "fail_fast")

        with pytest.raises(DashboardQueryError, match="Failed to fetch exploding metric") as excinfo:
            await explode()

        assert excinfo.value.metric == "exploding metric"
        assert isinstance(excinfo.value.__cause__, ValueError)
        assert _failures("exploding metric", "fail_fast") == before + 1

    async def test_fallback_returns_default(self):
        @dashboard_metric("soft metric", fallback=list)
        async def soft():
            raise ValueError("boom")

        assert await soft() == []
        assert _failures("soft metric", "fallback") >= 1

    def test_preserves_function_metadata(self):
        assert get_stats.__name__ == "get_stats"
        assert "previous calendar month" in get_stats.__doc__


class TestErrorTiers:
    """Each metric keeps its own failure policy"""

    async def test_stats_fail_fast(self, broken_session, now):
        with pytest.raises(DashboardQueryError, match="Failed to fetch dashboard stats"):
            await get_stats(broken_session, now=now)

    async def test_stock_alerts_degrade_to_empty(self, broken_session, now):
        assert await get_inventory_alerts(broken_session, now=now) == []
        assert await get_material_alerts(broken_session, now=now) == []
