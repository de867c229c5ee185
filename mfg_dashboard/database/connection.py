"""
Database Connection Management

Async SQLAlchemy 2.0 engine and session factory for the dashboard. The
reporting layer only reads: request sessions are rolled back on exit rather
than committed. Writes happen in the seeding CLI through its own sessions.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mfg_dashboard.config import get_settings
from mfg_dashboard.database.models import Base

logger = structlog.get_logger(__name__)


class DatabaseNotInitializedError(RuntimeError):
    """Raised when the engine is used before init_database() succeeded"""

    def __init__(self):
        super().__init__("Database not initialized. Call init_database() first.")


_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory shared by the API, the dashboard fan-out and the seeder"""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def _engine_options(database_url: str) -> Dict[str, Any]:
    """
    Engine keyword arguments for the target dialect.

    The dashboard opens one connection per metric for every request, so the
    PostgreSQL pool must hold at least as many connections as there are
    metrics. SQLite ignores pool sizing.
    """
    config = get_settings().database
    options: Dict[str, Any] = {"echo": config.echo, "pool_pre_ping": True}
    if make_url(database_url).get_backend_name() == "postgresql":
        options.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )
    return options


async def init_database(url: Optional[str] = None) -> AsyncEngine:
    """
    Create the engine and verify the data store answers.

    Args:
        url: Database URL overriding the configured one

    Raises:
        Exception: Whatever the driver raises when the store is unreachable
    """
    global _engine, _async_session_factory

    if _engine is not None:
        logger.warning("Database already initialized")
        return _engine

    database_url = url or get_settings().database.async_url
    engine = create_async_engine(database_url, **_engine_options(database_url))

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e), error_type=type(e).__name__)
        await engine.dispose()
        raise

    _engine = engine
    _async_session_factory = create_session_factory(engine)
    logger.info(
        "Database connection established",
        dialect=engine.dialect.name,
        database=engine.url.database,
    )
    return engine


async def close_database() -> None:
    """Dispose of pooled connections; safe to call when never initialized"""
    global _engine, _async_session_factory

    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _async_session_factory = None
    logger.info("Database connection pool closed")


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise DatabaseNotInitializedError()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Session factory of the initialized engine.

    Raises:
        DatabaseNotInitializedError: If init_database() has not completed
    """
    if _async_session_factory is None:
        raise DatabaseNotInitializedError()
    return _async_session_factory


async def create_schema(engine: Optional[AsyncEngine] = None) -> None:
    """Create all tables (demo and test databases only)"""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema created", tables=len(Base.metadata.tables))


@asynccontextmanager
async def read_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Session for read-only work.

    Whatever the session did is rolled back on exit, so a failed query never
    leaves a connection in an aborted transaction.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.rollback()


async def get_db_dependency() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency providing a read-only session.

    Example:
        @router.get("/stats")
        async def stats(db: AsyncSession = Depends(get_db_dependency)):
            ...
    """
    async with read_session() as session:
        yield session


async def check_database_health() -> Dict[str, Any]:
    """Round-trip a trivial query; never raises"""
    try:
        start = time.perf_counter()
        async with read_session() as db:
            await db.execute(text("SELECT 1"))
        latency_ms = (time.perf_counter() - start) * 1000
    except Exception as e:
        return {"status": "unhealthy", "error": str(e), "error_type": type(e).__name__}

    return {
        "status": "healthy",
        "latency_ms": round(latency_ms, 2),
        "dialect": get_engine().dialect.name,
    }
