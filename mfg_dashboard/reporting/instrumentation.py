"""
Metric Instrumentation

Timing, failure accounting and the error policy applied to each dashboard
metric function.
"""

import functools
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog
from prometheus_client import Counter, Histogram

from mfg_dashboard.reporting.exceptions import DashboardQueryError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


# =============================================================================
# METRICS
# =============================================================================

METRIC_DURATION = Histogram(
    "mfg_dashboard_metric_duration_seconds",
    "Time spent computing a dashboard metric",
    ["metric"],
)

METRIC_FAILURES = Counter(
    "mfg_dashboard_metric_failures_total",
    "Dashboard metric computations that raised",
    ["metric", "policy"],
)


def record_failure(metric: str, policy: str, error: Exception) -> None:
    """Log a failed computation and count it under its error policy"""
    logger.error(
        "Dashboard metric failed",
        metric=metric,
        policy=policy,
        error=str(error),
        error_type=type(error).__name__,
    )
    METRIC_FAILURES.labels(metric=metric, policy=policy).inc()


def dashboard_metric(
    name: str,
    fallback: Optional[Callable[[], Any]] = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Wrap a metric coroutine with timing and its error policy.

    Without a fallback the metric is fail-fast: any exception is re-raised as
    DashboardQueryError("Failed to fetch <name>"). With a fallback the error
    is logged and fallback() is returned instead.
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            with METRIC_DURATION.labels(metric=name).time():
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if fallback is not None:
                        record_failure(name, "fallback", e)
                        return fallback()
                    record_failure(name, "fail_fast", e)
                    raise DashboardQueryError(f"Failed to fetch {name}", metric=name) from e
        return wrapper
    return decorator
