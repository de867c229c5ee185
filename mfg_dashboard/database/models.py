"""
Database Models - Manufacturing Back Office

This module defines the relational read model the reporting layer aggregates
over. The schema is grouped into:

Catalog:
- ProductCategory, Product, Material, BillOfMaterial

Sales:
- Customer, CustomerOrder, OrderLine, Transaction

Procurement:
- Supplier, PurchaseOrder

Production:
- WorkCenter, ProductionOrder, Operation, QualityCheck

Administration:
- User
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, List
import uuid

from sqlalchemy import (
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# =============================================================================
# ENUMERATIONS
# =============================================================================

class RecordStatus(str, Enum):
    """Lifecycle status shared by catalog and partner records"""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class OrderStatus(str, Enum):
    """Customer and production order status"""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OperationStatus(str, Enum):
    """Work-center operation status"""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class PurchaseOrderStatus(str, Enum):
    """Purchase order status"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class QualityCheckStatus(str, Enum):
    """Quality inspection status"""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class TransactionStatus(str, Enum):
    """Payment transaction status"""
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


def _uuid_pk():
    return mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


def _created_at():
    return mapped_column(DateTime, server_default=func.now(), nullable=False)


# =============================================================================
# ADMINISTRATION
# =============================================================================

class User(Base):
    """Back-office user account"""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = _uuid_pk()
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(200))
    created_at: Mapped[datetime] = _created_at()


# =============================================================================
# CATALOG
# =============================================================================

class ProductCategory(Base):
    """Product grouping used for sales breakdowns"""
    __tablename__ = "product_categories"

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    status: Mapped[RecordStatus] = mapped_column(
        SQLEnum(RecordStatus), default=RecordStatus.ACTIVE, nullable=False
    )
    created_at: Mapped[datetime] = _created_at()

    products: Mapped[List["Product"]] = relationship(back_populates="category")


class Product(Base):
    """
    Finished good.

    Stock is tracked in whole units; the minimum stock level drives
    low-stock alerting.
    """
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = _uuid_pk()
    sku: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("product_categories.id")
    )

    # Inventory
    current_stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    minimum_stock_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lead_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # days

    # Pricing
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    selling_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)

    status: Mapped[RecordStatus] = mapped_column(
        SQLEnum(RecordStatus), default=RecordStatus.ACTIVE, nullable=False
    )
    created_at: Mapped[datetime] = _created_at()

    # Relationships
    category: Mapped[Optional["ProductCategory"]] = relationship(back_populates="products")
    order_lines: Mapped[List["OrderLine"]] = relationship(back_populates="product")
    boms: Mapped[List["BillOfMaterial"]] = relationship(back_populates="product")
    production_orders: Mapped[List["ProductionOrder"]] = relationship(back_populates="product")

    __table_args__ = (
        Index("ix_products_status", "status"),
        Index("ix_products_category", "category_id"),
    )


class Material(Base):
    """Raw material consumed through bills of materials"""
    __tablename__ = "materials"

    id: Mapped[uuid.UUID] = _uuid_pk()
    sku: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    unit_of_measure: Mapped[Optional[str]] = mapped_column(String(20))

    current_stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    minimum_stock_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lead_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # days
    cost_per_unit: Mapped[Decimal] = mapped_column(Numeric(12, 4), default=0, nullable=False)

    status: Mapped[RecordStatus] = mapped_column(
        SQLEnum(RecordStatus), default=RecordStatus.ACTIVE, nullable=False
    )
    created_at: Mapped[datetime] = _created_at()

    boms: Mapped[List["BillOfMaterial"]] = relationship(back_populates="material")

    __table_args__ = (
        Index("ix_materials_status", "status"),
    )


class BillOfMaterial(Base):
    """
    BOM entry: quantity of one material needed per unit of one product.

    waste_percentage is the expected scrap on top of the nominal quantity.
    """
    __tablename__ = "bill_of_materials"

    id: Mapped[uuid.UUID] = _uuid_pk()
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id"), nullable=False
    )
    material_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("materials.id"), nullable=False
    )
    quantity_needed: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    waste_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=0, nullable=False)
    created_at: Mapped[datetime] = _created_at()

    product: Mapped["Product"] = relationship(back_populates="boms")
    material: Mapped["Material"] = relationship(back_populates="boms")

    __table_args__ = (
        Index("ix_bom_material", "material_id"),
        Index("ix_bom_product", "product_id"),
    )


# =============================================================================
# SALES
# =============================================================================

class Customer(Base):
    """Customer account"""
    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    status: Mapped[RecordStatus] = mapped_column(
        SQLEnum(RecordStatus), default=RecordStatus.ACTIVE, nullable=False
    )
    created_at: Mapped[datetime] = _created_at()

    orders: Mapped[List["CustomerOrder"]] = relationship(back_populates="customer")


class CustomerOrder(Base):
    """Sales order header"""
    __tablename__ = "customer_orders"

    id: Mapped[uuid.UUID] = _uuid_pk()
    order_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customers.id"), nullable=False
    )
    order_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    required_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(OrderStatus), default=OrderStatus.PENDING, nullable=False
    )
    created_at: Mapped[datetime] = _created_at()

    customer: Mapped["Customer"] = relationship(back_populates="orders")
    lines: Mapped[List["OrderLine"]] = relationship(back_populates="order")

    __table_args__ = (
        Index("ix_customer_orders_order_date", "order_date"),
        Index("ix_customer_orders_status", "status"),
        Index("ix_customer_orders_customer", "customer_id"),
    )


class OrderLine(Base):
    """Sales order line"""
    __tablename__ = "order_lines"

    id: Mapped[uuid.UUID] = _uuid_pk()
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customer_orders.id"), nullable=False
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    created_at: Mapped[datetime] = _created_at()

    order: Mapped["CustomerOrder"] = relationship(back_populates="lines")
    product: Mapped["Product"] = relationship(back_populates="order_lines")

    __table_args__ = (
        Index("ix_order_lines_product_created", "product_id", "created_at"),
    )


class Transaction(Base):
    """Payment transaction; only COMPLETED ones count as revenue"""
    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = _uuid_pk()
    reference: Mapped[Optional[str]] = mapped_column(String(100))
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[TransactionStatus] = mapped_column(
        SQLEnum(TransactionStatus), default=TransactionStatus.PENDING, nullable=False
    )
    created_at: Mapped[datetime] = _created_at()

    __table_args__ = (
        Index("ix_transactions_status_created", "status", "created_at"),
    )


# =============================================================================
# PROCUREMENT
# =============================================================================

class Supplier(Base):
    """Material supplier"""
    __tablename__ = "suppliers"

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    status: Mapped[RecordStatus] = mapped_column(
        SQLEnum(RecordStatus), default=RecordStatus.ACTIVE, nullable=False
    )
    created_at: Mapped[datetime] = _created_at()

    purchase_orders: Mapped[List["PurchaseOrder"]] = relationship(back_populates="supplier")


class PurchaseOrder(Base):
    """Purchase order header"""
    __tablename__ = "purchase_orders"

    id: Mapped[uuid.UUID] = _uuid_pk()
    po_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    supplier_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("suppliers.id"), nullable=False
    )
    order_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    expected_delivery: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[PurchaseOrderStatus] = mapped_column(
        SQLEnum(PurchaseOrderStatus), default=PurchaseOrderStatus.PENDING, nullable=False
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    created_at: Mapped[datetime] = _created_at()

    supplier: Mapped["Supplier"] = relationship(back_populates="purchase_orders")

    __table_args__ = (
        Index("ix_purchase_orders_supplier_created", "supplier_id", "created_at"),
        Index("ix_purchase_orders_status", "status"),
    )


# =============================================================================
# PRODUCTION
# =============================================================================

class WorkCenter(Base):
    """Production resource with a fixed hourly capacity"""
    __tablename__ = "work_centers"

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    capacity_per_hour: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    status: Mapped[RecordStatus] = mapped_column(
        SQLEnum(RecordStatus), default=RecordStatus.ACTIVE, nullable=False
    )
    created_at: Mapped[datetime] = _created_at()

    operations: Mapped[List["Operation"]] = relationship(back_populates="work_center")


class ProductionOrder(Base):
    """Order to manufacture a quantity of one product"""
    __tablename__ = "production_orders"

    id: Mapped[uuid.UUID] = _uuid_pk()
    order_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(OrderStatus), default=OrderStatus.PENDING, nullable=False
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = _created_at()

    product: Mapped["Product"] = relationship(back_populates="production_orders")
    operations: Mapped[List["Operation"]] = relationship(back_populates="production_order")
    quality_checks: Mapped[List["QualityCheck"]] = relationship(back_populates="production_order")

    __table_args__ = (
        Index("ix_production_orders_status", "status"),
        Index("ix_production_orders_due", "due_date"),
    )


class Operation(Base):
    """Scheduled interval of work at a work center for a production order"""
    __tablename__ = "operations"

    id: Mapped[uuid.UUID] = _uuid_pk()
    production_order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("production_orders.id"), nullable=False
    )
    work_center_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("work_centers.id"), nullable=False
    )
    name: Mapped[Optional[str]] = mapped_column(String(100))
    start_time: Mapped[Optional[datetime]] = mapped_column(DateTime)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime)
    status: Mapped[OperationStatus] = mapped_column(
        SQLEnum(OperationStatus), default=OperationStatus.PENDING, nullable=False
    )
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    created_at: Mapped[datetime] = _created_at()

    production_order: Mapped["ProductionOrder"] = relationship(back_populates="operations")
    work_center: Mapped["WorkCenter"] = relationship(back_populates="operations")

    __table_args__ = (
        Index("ix_operations_work_center_created", "work_center_id", "created_at"),
    )


class QualityCheck(Base):
    """
    Quality inspection result.

    defects_found holds a comma-delimited list of defect tags, or NULL
    when nothing was found.
    """
    __tablename__ = "quality_checks"

    id: Mapped[uuid.UUID] = _uuid_pk()
    production_order_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("production_orders.id")
    )
    check_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[QualityCheckStatus] = mapped_column(
        SQLEnum(QualityCheckStatus), default=QualityCheckStatus.PENDING, nullable=False
    )
    defects_found: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = _created_at()

    production_order: Mapped[Optional["ProductionOrder"]] = relationship(
        back_populates="quality_checks"
    )

    __table_args__ = (
        Index("ix_quality_checks_check_date", "check_date"),
    )
