"""
Manufacturing Dashboard API

ASGI application: dashboard and health routers, middleware stack, the
DashboardQueryError to 503 mapping and the Prometheus /metrics mount.

    uvicorn mfg_dashboard.main:app
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CollectorRegistry, make_asgi_app, multiprocess
import structlog

from mfg_dashboard.config import get_settings
from mfg_dashboard.config.logging import configure_logging
from mfg_dashboard.database.connection import (
    DatabaseNotInitializedError,
    close_database,
    init_database,
)
from mfg_dashboard.reporting import DashboardQueryError
from mfg_dashboard.serving.api.middleware import (
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from mfg_dashboard.serving.api.routes import dashboard_router, health_router

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Starting Manufacturing Dashboard API", environment=settings.app_env, version=settings.version)

    try:
        await init_database()
    except Exception as e:
        # the API still starts; /health/ready reports the outage
        logger.warning("Database unavailable at startup", error=str(e), error_type=type(e).__name__)

    yield

    logger.info("Shutting down Manufacturing Dashboard API")
    await close_database()


app = FastAPI(
    title="Manufacturing Dashboard API",
    description="Aggregated sales, inventory, production and quality metrics for manufacturing operations",
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Outermost last: rate limiting runs before anything is logged or computed
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.security.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.add_middleware(
    RateLimitMiddleware,
    max_requests=settings.security.rate_limit_requests,
    window_seconds=settings.security.rate_limit_window_seconds,
)


@app.exception_handler(DashboardQueryError)
async def dashboard_query_error_handler(request: Request, exc: DashboardQueryError) -> JSONResponse:
    """A metric that cannot be computed means the data store is unavailable"""
    logger.error("Dashboard request failed", metric=exc.metric, error=str(exc))
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(DatabaseNotInitializedError)
async def database_not_initialized_handler(request: Request, exc: DatabaseNotInitializedError) -> JSONResponse:
    logger.error("Request before database initialization", path=request.url.path)
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})


app.include_router(health_router, prefix="/api/v1", tags=["Health"])
app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["Dashboard"])


def metrics_app():
    """Prometheus exposition app; aggregates Gunicorn workers in multiprocess mode"""
    if os.getenv("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return make_asgi_app(registry)
    return make_asgi_app()


if settings.monitoring.enable_metrics:
    app.mount("/metrics", metrics_app())


@app.get("/api/v1/info", tags=["Health"])
async def api_info():
    return {
        "name": "Manufacturing Dashboard API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
        "dashboard": "/api/v1/dashboard/",
    }
