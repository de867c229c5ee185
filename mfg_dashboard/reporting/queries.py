"""
Shared Query Helpers

Small scalar queries reused across the dashboard metrics.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable
from uuid import UUID

from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from mfg_dashboard.database.models import OrderLine
from mfg_dashboard.reporting.calculations import to_decimal


async def count_rows(db: AsyncSession, model, *conditions) -> int:
    """COUNT(*) of a mapped table under optional filter conditions"""
    stmt = select(func.count()).select_from(model)
    if conditions:
        stmt = stmt.where(and_(*conditions))
    result = await db.execute(stmt)
    return result.scalar_one() or 0


async def sum_column(db: AsyncSession, column, *conditions) -> Decimal:
    """SUM of a numeric column as Decimal; 0 when nothing matches"""
    stmt = select(func.sum(column))
    if conditions:
        stmt = stmt.where(and_(*conditions))
    result = await db.execute(stmt)
    return to_decimal(result.scalar_one_or_none())


async def product_consumption(
    db: AsyncSession,
    since: datetime,
    product_ids: Iterable[UUID],
) -> Dict[UUID, int]:
    """Units sold per product on order lines created since `since`"""
    product_ids = list(product_ids)
    if not product_ids:
        return {}

    result = await db.execute(
        select(
            OrderLine.product_id,
            func.sum(OrderLine.quantity).label("quantity"),
        )
        .where(
            and_(
                OrderLine.product_id.in_(product_ids),
                OrderLine.created_at >= since,
            )
        )
        .group_by(OrderLine.product_id)
    )
    return {row.product_id: int(row.quantity or 0) for row in result}
