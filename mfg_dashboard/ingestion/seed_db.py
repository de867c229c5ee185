"""
Database Seeder

Loads a generated manufacturing dataset into the configured database.

Usage:
    python -m mfg_dashboard.ingestion.seed_db --products 60 --orders 600
"""

import argparse
import asyncio
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type

import polars as pl
import structlog
from sqlalchemy import Enum as SQLEnum, Float, Numeric, Uuid, insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mfg_dashboard.config.logging import configure_logging
from mfg_dashboard.data.generators import DataGenerator
from mfg_dashboard.database.connection import (
    close_database,
    create_schema,
    get_session_factory,
    init_database,
)
from mfg_dashboard.database.models import Base

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 1000


def _model_for_table(table_name: str) -> Type[Base]:
    for mapper in Base.registry.mappers:
        if mapper.local_table.name == table_name:
            return mapper.class_
    raise KeyError(f"No model mapped to table {table_name!r}")


def coerce_record(model: Type[Base], record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a DataFrame row to bind values for the model's columns.

    UUID strings become uuid.UUID, exact numerics become Decimal and enum
    names become enum members. Unknown keys are dropped.
    """
    columns = model.__table__.columns
    values = {}
    for key, value in record.items():
        if key not in columns:
            continue
        column_type = columns[key].type
        if value is not None:
            if isinstance(column_type, Uuid):
                value = uuid.UUID(str(value))
            elif isinstance(column_type, Numeric) and not isinstance(column_type, Float):
                value = Decimal(str(value))
            elif isinstance(column_type, SQLEnum) and column_type.enum_class is not None:
                value = column_type.enum_class[value]
        values[key] = value
    return values


async def execute_batch_insert(
    session_factory: async_sessionmaker[AsyncSession],
    model: Type[Base],
    records: List[Dict[str, Any]],
) -> None:
    """Insert records in chunks using Core insert"""
    if not records:
        return

    async with session_factory() as db:
        for i in range(0, len(records), CHUNK_SIZE):
            chunk = [coerce_record(model, r) for r in records[i:i + CHUNK_SIZE]]
            await db.execute(insert(model), chunk)
        await db.commit()
    logger.info("Inserted records", table=model.__tablename__, rows=len(records))


async def seed_dataset(
    session_factory: async_sessionmaker[AsyncSession],
    data: Dict[str, pl.DataFrame],
) -> None:
    """Load generated tables; `data` must list parent tables before children"""
    for table_name, df in data.items():
        await execute_batch_insert(session_factory, _model_for_table(table_name), df.to_dicts())


async def main(
    url: Optional[str] = None,
    n_products: int = 60,
    n_orders: int = 600,
    seed: int = 42,
) -> None:
    configure_logging()
    logger.info("Starting database seeding...")

    await init_database(url)
    try:
        await create_schema()
        data = DataGenerator(seed=seed).generate_all(n_products=n_products, n_orders=n_orders)
        await seed_dataset(get_session_factory(), data)
        logger.info("Database seeding completed successfully!")
    except Exception as e:
        logger.error("Seeding failed", error=str(e), error_type=type(e).__name__)
        raise
    finally:
        await close_database()


def cli() -> None:
    parser = argparse.ArgumentParser(description="Seed the dashboard database with demo data")
    parser.add_argument("--url", help="Database URL (defaults to the configured one)")
    parser.add_argument("--products", type=int, default=60, help="Products to generate")
    parser.add_argument("--orders", type=int, default=600, help="Customer orders to generate")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    asyncio.run(main(args.url, args.products, args.orders, args.seed))


if __name__ == "__main__":
    cli()
