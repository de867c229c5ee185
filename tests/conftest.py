"""
Test Suite Configuration
"""
import itertools
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from mfg_dashboard.config import Settings
from mfg_dashboard.database.connection import create_session_factory
from mfg_dashboard.database.models import (
    Base,
    BillOfMaterial,
    Customer,
    CustomerOrder,
    Material,
    Operation,
    OperationStatus,
    OrderLine,
    OrderStatus,
    Product,
    ProductCategory,
    ProductionOrder,
    PurchaseOrder,
    PurchaseOrderStatus,
    QualityCheck,
    QualityCheckStatus,
    RecordStatus,
    Supplier,
    Transaction,
    TransactionStatus,
    User,
    WorkCenter,
)

# Thursday; its Sunday-based week is Oct 11 - Oct 17
NOW = datetime(2026, 10, 15, 12, 0, 0)
LONG_AGO = NOW - timedelta(days=400)


class ModelFactory:
    """Builds model instances with explicit ids and sensible defaults"""

    def __init__(self):
        self._seq = itertools.count(1)

    def _n(self) -> int:
        return next(self._seq)

    def user(self, **kwargs) -> User:
        n = self._n()
        values = dict(id=uuid.uuid4(), email=f"user{n}@example.com", name=f"User {n}", created_at=LONG_AGO)
        values.update(kwargs)
        return User(**values)

    def category(self, **kwargs) -> ProductCategory:
        n = self._n()
        values = dict(id=uuid.uuid4(), name=f"Category {n}", status=RecordStatus.ACTIVE, created_at=LONG_AGO)
        values.update(kwargs)
        return ProductCategory(**values)

    def product(self, category: Optional[ProductCategory] = None, **kwargs) -> Product:
        n = self._n()
        values = dict(
            id=uuid.uuid4(),
            sku=f"PRD-{n:04d}",
            name=f"Product {n}",
            category_id=category.id if category else None,
            current_stock=100,
            minimum_stock_level=10,
            lead_time=7,
            unit_cost=Decimal("10.00"),
            selling_price=Decimal("20.00"),
            status=RecordStatus.ACTIVE,
            created_at=LONG_AGO,
        )
        values.update(kwargs)
        return Product(**values)

    def material(self, **kwargs) -> Material:
        n = self._n()
        values = dict(
            id=uuid.uuid4(),
            sku=f"MAT-{n:04d}",
            name=f"Material {n:03d}",
            unit_of_measure="kg",
            current_stock=1000,
            minimum_stock_level=100,
            lead_time=14,
            cost_per_unit=Decimal("1.0000"),
            status=RecordStatus.ACTIVE,
            created_at=LONG_AGO,
        )
        values.update(kwargs)
        return Material(**values)

    def bom(self, product: Product, material: Material, **kwargs) -> BillOfMaterial:
        values = dict(
            id=uuid.uuid4(),
            product_id=product.id,
            material_id=material.id,
            quantity_needed=Decimal("1"),
            waste_percentage=Decimal("0"),
            created_at=LONG_AGO,
        )
        values.update(kwargs)
        return BillOfMaterial(**values)

    def customer(self, **kwargs) -> Customer:
        n = self._n()
        values = dict(id=uuid.uuid4(), name=f"Customer {n}", status=RecordStatus.ACTIVE, created_at=LONG_AGO)
        values.update(kwargs)
        return Customer(**values)

    def order(self, customer: Customer, order_date: datetime = NOW, **kwargs) -> CustomerOrder:
        n = self._n()
        values = dict(
            id=uuid.uuid4(),
            order_number=f"SO-{n:05d}",
            customer_id=customer.id,
            order_date=order_date,
            total_amount=Decimal("0"),
            status=OrderStatus.COMPLETED,
            created_at=order_date,
        )
        values.update(kwargs)
        return CustomerOrder(**values)

    def line(
        self,
        order: CustomerOrder,
        product: Product,
        quantity: int,
        unit_price: str,
        created_at: datetime = NOW,
    ) -> OrderLine:
        return OrderLine(
            id=uuid.uuid4(),
            order_id=order.id,
            product_id=product.id,
            quantity=quantity,
            unit_price=Decimal(unit_price),
            created_at=created_at,
        )

    def transaction(self, amount: str, created_at: datetime, **kwargs) -> Transaction:
        values = dict(
            id=uuid.uuid4(),
            amount=Decimal(amount),
            status=TransactionStatus.COMPLETED,
            created_at=created_at,
        )
        values.update(kwargs)
        return Transaction(**values)

    def supplier(self, **kwargs) -> Supplier:
        n = self._n()
        values = dict(id=uuid.uuid4(), name=f"Supplier {n}", code=f"SUP-{n:03d}", status=RecordStatus.ACTIVE, created_at=LONG_AGO)
        values.update(kwargs)
        return Supplier(**values)

    def purchase_order(self, supplier: Supplier, order_date: datetime, **kwargs) -> PurchaseOrder:
        n = self._n()
        values = dict(
            id=uuid.uuid4(),
            po_number=f"PO-{n:05d}",
            supplier_id=supplier.id,
            order_date=order_date,
            expected_delivery=order_date + timedelta(days=7),
            status=PurchaseOrderStatus.PENDING,
            total_amount=Decimal("0"),
            created_at=order_date,
        )
        values.update(kwargs)
        return PurchaseOrder(**values)

    def work_center(self, **kwargs) -> WorkCenter:
        n = self._n()
        values = dict(id=uuid.uuid4(), name=f"Work Center {n}", capacity_per_hour=10.0, status=RecordStatus.ACTIVE, created_at=LONG_AGO)
        values.update(kwargs)
        return WorkCenter(**values)

    def production_order(self, product: Product, **kwargs) -> ProductionOrder:
        n = self._n()
        values = dict(
            id=uuid.uuid4(),
            order_number=f"MO-{n:05d}",
            product_id=product.id,
            quantity=10,
            status=OrderStatus.PENDING,
            created_at=NOW - timedelta(days=5),
        )
        values.update(kwargs)
        return ProductionOrder(**values)

    def operation(self, production_order: ProductionOrder, work_center: WorkCenter, **kwargs) -> Operation:
        values = dict(
            id=uuid.uuid4(),
            production_order_id=production_order.id,
            work_center_id=work_center.id,
            status=OperationStatus.PENDING,
            cost=Decimal("0"),
            created_at=NOW - timedelta(days=5),
        )
        values.update(kwargs)
        return Operation(**values)

    def quality_check(self, check_date: datetime, **kwargs) -> QualityCheck:
        values = dict(
            id=uuid.uuid4(),
            check_date=check_date,
            status=QualityCheckStatus.COMPLETED,
            created_at=check_date,
        )
        values.update(kwargs)
        return QualityCheck(**values)


class BrokenSession:
    """Stands in for an AsyncSession whose database is unreachable"""

    def __init__(self):
        self.rollbacks = 0

    async def execute(self, *args, **kwargs):
        raise ConnectionError("database unavailable")

    async def rollback(self):
        self.rollbacks += 1

    async def close(self):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


@pytest.fixture
def now() -> datetime:
    """Reference instant shared by the reporting tests"""
    return NOW


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(app_env="testing", debug=True)


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine so concurrent sessions see the same data"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'dashboard.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session used to run the code under test"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(session_factory):
    """Persist model instances in their own committed session"""
    async def _seed(*objects):
        async with session_factory() as session:
            session.add_all(objects)
            await session.commit()
    return _seed


@pytest.fixture
def factory() -> ModelFactory:
    return ModelFactory()


@pytest.fixture
def broken_session() -> BrokenSession:
    return BrokenSession()


@pytest.fixture
def broken_session_factory():
    """Session factory whose sessions fail every query"""
    return BrokenSession
