"""
Synthetic Data Generator

Generates a realistic manufacturing back office for demos and development.
Includes:
- Product catalog with categories, raw materials and bills of materials
- Customers, orders with order lines, and payment transactions
- Suppliers with purchase orders
- Work centers, production orders, operations and quality checks

Every table is produced as a polars DataFrame whose columns match the
database models; ids are UUID strings.
"""

import random
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Optional

import polars as pl
import structlog
from faker import Faker

from mfg_dashboard.reporting.periods import utcnow

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

CATEGORIES = [
    ("Fasteners", ["Bolt", "Screw", "Rivet", "Anchor"]),
    ("Enclosures", ["Cabinet", "Housing", "Panel", "Rack"]),
    ("Hydraulics", ["Cylinder", "Valve", "Pump", "Manifold"]),
    ("Electrical", ["Harness", "Switchgear", "Controller", "Relay"]),
    ("Bearings", ["Bushing", "Roller", "Pillow Block", "Thrust Washer"]),
]

MATERIALS = [
    ("Cold Rolled Steel", "kg", 2.10),
    ("Stainless Steel 304", "kg", 4.85),
    ("Aluminium 6061", "kg", 3.40),
    ("Copper Wire", "m", 0.65),
    ("ABS Resin", "kg", 1.95),
    ("Nitrile Seal", "pcs", 0.35),
    ("Brass Rod", "kg", 6.20),
    ("Powder Coat", "kg", 8.75),
    ("Hydraulic Oil", "l", 3.10),
    ("PCB Assembly", "pcs", 12.50),
]

WORK_CENTERS = [
    ("CNC Machining", 40.0),
    ("Laser Cutting", 60.0),
    ("Welding Bay", 25.0),
    ("Assembly Line A", 80.0),
    ("Assembly Line B", 75.0),
    ("Paint Shop", 50.0),
]

DEFECT_TAGS = ["scratch", "dent", "misalignment", "porosity", "burr", "wrong torque", "discoloration"]

ORDER_STATUSES = [
    ("PENDING", 0.15),
    ("IN_PROGRESS", 0.20),
    ("COMPLETED", 0.60),
    ("CANCELLED", 0.05),
]

PURCHASE_ORDER_STATUSES = [
    ("PENDING", 0.15),
    ("APPROVED", 0.20),
    ("COMPLETED", 0.60),
    ("CANCELLED", 0.05),
]


def _new_id() -> str:
    return str(uuid.UUID(int=random.getrandbits(128), version=4))


def _weighted(choices) -> str:
    return random.choices([c[0] for c in choices], weights=[c[1] for c in choices])[0]


def _frame(rows: List[dict]) -> pl.DataFrame:
    # nullable columns may be empty for the first rows
    return pl.DataFrame(rows, infer_schema_length=None)


# =============================================================================
# GENERATORS
# =============================================================================

class CatalogGenerator:
    """Generate categories, products, materials and bills of materials"""

    def __init__(self, fake: Faker):
        self.fake = fake

    def generate(self, n_products: int = 60, now: Optional[datetime] = None) -> Dict[str, pl.DataFrame]:
        now = now or utcnow()

        categories = [
            {
                "id": _new_id(),
                "name": name,
                "status": "ACTIVE",
                "created_at": now - timedelta(days=720),
            }
            for name, _ in CATEGORIES
        ]

        products = []
        for _ in range(n_products):
            category_index = random.randrange(len(CATEGORIES))
            kind = random.choice(CATEGORIES[category_index][1])
            unit_cost = round(random.uniform(5, 400), 2)
            minimum = random.randint(10, 80)
            products.append({
                "id": _new_id(),
                "sku": f"PRD-{self.fake.unique.random_number(digits=6, fix_len=True)}",
                "name": f"{self.fake.word().title()} {kind}",
                "description": self.fake.sentence(nb_words=10),
                "category_id": categories[category_index]["id"],
                # roughly a quarter of the catalog sits near its reorder point
                "current_stock": random.randint(0, int(minimum * 1.3)) if random.random() < 0.25
                else random.randint(minimum * 2, minimum * 10),
                "minimum_stock_level": minimum,
                "lead_time": random.randint(3, 45),
                "unit_cost": unit_cost,
                "selling_price": round(unit_cost * random.uniform(1.2, 2.2), 2),
                "status": "ACTIVE" if random.random() > 0.05 else "INACTIVE",
                "created_at": self.fake.date_time_between(start_date=now - timedelta(days=540), end_date=now),
            })

        materials = []
        for name, unit, cost in MATERIALS:
            minimum = random.randint(100, 1000)
            materials.append({
                "id": _new_id(),
                "sku": f"MAT-{self.fake.unique.random_number(digits=5, fix_len=True)}",
                "name": name,
                "unit_of_measure": unit,
                "current_stock": random.randint(0, int(minimum * 1.3)) if random.random() < 0.3
                else random.randint(minimum * 2, minimum * 6),
                "minimum_stock_level": minimum,
                "lead_time": random.randint(5, 60),
                "cost_per_unit": cost,
                "status": "ACTIVE",
                "created_at": now - timedelta(days=700),
            })

        boms = []
        for product in products:
            for material in random.sample(materials, k=random.randint(1, 3)):
                boms.append({
                    "id": _new_id(),
                    "product_id": product["id"],
                    "material_id": material["id"],
                    "quantity_needed": round(random.uniform(0.2, 12.0), 4),
                    "waste_percentage": random.choice([0.0, 1.5, 2.0, 3.0, 5.0, 8.0]),
                    "created_at": product["created_at"],
                })

        return {
            "product_categories": _frame(categories),
            "products": _frame(products),
            "materials": _frame(materials),
            "bill_of_materials": _frame(boms),
        }


class SalesGenerator:
    """Generate customers, their orders with lines, and payment transactions"""

    def __init__(self, fake: Faker, products_df: pl.DataFrame):
        self.fake = fake
        self.products = products_df.select(["id", "selling_price"]).to_dicts()

    def generate(
        self,
        n_customers: int = 40,
        n_orders: int = 600,
        now: Optional[datetime] = None,
    ) -> Dict[str, pl.DataFrame]:
        now = now or utcnow()
        start = now - timedelta(days=365)

        customers = [
            {
                "id": _new_id(),
                "name": self.fake.company(),
                "email": self.fake.company_email(),
                "status": "ACTIVE" if random.random() > 0.1 else "INACTIVE",
                "created_at": self.fake.date_time_between(start_date=start - timedelta(days=365), end_date=start),
            }
            for _ in range(n_customers)
        ]

        orders: List[dict] = []
        lines: List[dict] = []
        transactions: List[dict] = []

        for _ in range(n_orders):
            order_id = _new_id()
            order_date = self.fake.date_time_between(start_date=start, end_date=now)
            status = "PENDING" if order_date > now - timedelta(days=3) else _weighted(ORDER_STATUSES)

            total = 0.0
            for product in random.sample(self.products, k=random.randint(1, min(4, len(self.products)))):
                quantity = random.choices([1, 2, 5, 10, 25], weights=[0.35, 0.25, 0.2, 0.15, 0.05])[0]
                unit_price = float(product["selling_price"])
                total += unit_price * quantity
                lines.append({
                    "id": _new_id(),
                    "order_id": order_id,
                    "product_id": product["id"],
                    "quantity": quantity,
                    "unit_price": unit_price,
                    "created_at": order_date,
                })

            total = round(total, 2)
            orders.append({
                "id": order_id,
                "order_number": f"SO-{self.fake.unique.random_number(digits=7, fix_len=True)}",
                "customer_id": random.choice(customers)["id"],
                "order_date": order_date,
                "required_date": order_date + timedelta(days=random.randint(7, 45)),
                "total_amount": total,
                "status": status,
                "created_at": order_date,
            })

            if status != "CANCELLED":
                transactions.append({
                    "id": _new_id(),
                    "reference": f"TX-{self.fake.unique.random_number(digits=8, fix_len=True)}",
                    "amount": total,
                    "status": "COMPLETED" if status == "COMPLETED" else "PENDING",
                    "created_at": order_date + timedelta(hours=random.randint(1, 72)),
                })

        return {
            "customers": _frame(customers),
            "customer_orders": _frame(orders),
            "order_lines": _frame(lines),
            "transactions": _frame(transactions),
        }


class ProcurementGenerator:
    """Generate suppliers and purchase orders"""

    def __init__(self, fake: Faker):
        self.fake = fake

    def generate(
        self,
        n_suppliers: int = 12,
        n_purchase_orders: int = 150,
        now: Optional[datetime] = None,
    ) -> Dict[str, pl.DataFrame]:
        now = now or utcnow()

        suppliers = [
            {
                "id": _new_id(),
                "name": self.fake.company(),
                "code": f"SUP-{index + 1:03d}",
                "status": "ACTIVE" if random.random() > 0.1 else "INACTIVE",
                "created_at": now - timedelta(days=900),
            }
            for index in range(n_suppliers)
        ]

        purchase_orders = []
        for _ in range(n_purchase_orders):
            order_date = self.fake.date_time_between(start_date=now - timedelta(days=270), end_date=now)
            purchase_orders.append({
                "id": _new_id(),
                "po_number": f"PO-{self.fake.unique.random_number(digits=7, fix_len=True)}",
                "supplier_id": random.choice(suppliers)["id"],
                "order_date": order_date,
                "expected_delivery": order_date + timedelta(days=random.randint(5, 40)),
                "status": _weighted(PURCHASE_ORDER_STATUSES),
                "total_amount": round(random.uniform(250, 25000), 2),
                "created_at": order_date,
            })

        return {
            "suppliers": _frame(suppliers),
            "purchase_orders": _frame(purchase_orders),
        }


class ProductionGenerator:
    """Generate work centers, production orders, operations and quality checks"""

    def __init__(self, fake: Faker, products_df: pl.DataFrame):
        self.fake = fake
        self.product_ids = products_df["id"].to_list()

    def generate(self, n_orders: int = 120, now: Optional[datetime] = None) -> Dict[str, pl.DataFrame]:
        now = now or utcnow()

        work_centers = [
            {
                "id": _new_id(),
                "name": name,
                "capacity_per_hour": capacity,
                "status": "ACTIVE",
                "created_at": now - timedelta(days=900),
            }
            for name, capacity in WORK_CENTERS
        ]

        production_orders = []
        operations = []
        quality_checks = []

        for _ in range(n_orders):
            order_id = _new_id()
            created_at = self.fake.date_time_between(start_date=now - timedelta(days=120), end_date=now)
            status = random.choices(
                ["PENDING", "IN_PROGRESS", "COMPLETED"], weights=[0.2, 0.25, 0.55]
            )[0]
            production_orders.append({
                "id": order_id,
                "order_number": f"MO-{self.fake.unique.random_number(digits=7, fix_len=True)}",
                "product_id": random.choice(self.product_ids),
                "quantity": random.choice([10, 25, 50, 100, 250]),
                "status": status,
                "due_date": created_at + timedelta(days=random.randint(3, 30)),
                "created_at": created_at,
            })

            step_start = created_at + timedelta(hours=random.randint(1, 24))
            for center in random.sample(work_centers, k=random.randint(1, 3)):
                hours = random.uniform(0.5, 8.0)
                started = status != "PENDING"
                finished = status == "COMPLETED" or (started and random.random() < 0.5)
                operations.append({
                    "id": _new_id(),
                    "production_order_id": order_id,
                    "work_center_id": center["id"],
                    "name": center["name"],
                    "start_time": step_start if started else None,
                    "end_time": step_start + timedelta(hours=hours) if finished else None,
                    "status": "COMPLETED" if finished else ("IN_PROGRESS" if started else "PENDING"),
                    "cost": round(hours * random.uniform(40, 120), 2),
                    "created_at": created_at,
                })
                step_start += timedelta(hours=hours + random.uniform(0.5, 4))

            if status == "COMPLETED":
                defects = None
                if random.random() < 0.2:
                    defects = ", ".join(random.sample(DEFECT_TAGS, k=random.randint(1, 2)))
                quality_checks.append({
                    "id": _new_id(),
                    "production_order_id": order_id,
                    "check_date": step_start,
                    "status": "FAILED" if defects and random.random() < 0.5 else "COMPLETED",
                    "defects_found": defects,
                    "notes": self.fake.sentence(nb_words=8) if defects else None,
                    "created_at": step_start,
                })

        return {
            "work_centers": _frame(work_centers),
            "production_orders": _frame(production_orders),
            "operations": _frame(operations),
            "quality_checks": _frame(quality_checks),
        }


# =============================================================================
# MAIN GENERATOR
# =============================================================================

class DataGenerator:
    """Main data generator orchestrator"""

    def __init__(self, seed: int = 42, output_dir: Optional[str] = None):
        random.seed(seed)
        Faker.seed(seed)
        self.fake = Faker()
        self.output_dir = Path(output_dir) if output_dir else None

    def generate_all(
        self,
        n_products: int = 60,
        n_customers: int = 40,
        n_orders: int = 600,
        n_suppliers: int = 12,
        n_purchase_orders: int = 150,
        n_production_orders: int = 120,
        n_users: int = 8,
        now: Optional[datetime] = None,
    ) -> Dict[str, pl.DataFrame]:
        """Generate the complete dataset keyed by table name, parents first"""
        now = now or utcnow()
        logger.info("Generating synthetic manufacturing data", now=now.isoformat())

        users = _frame([
            {
                "id": _new_id(),
                "email": self.fake.unique.company_email(),
                "name": self.fake.name(),
                "created_at": self.fake.date_time_between(start_date=now - timedelta(days=400), end_date=now),
            }
            for _ in range(n_users)
        ])

        catalog = CatalogGenerator(self.fake).generate(n_products, now=now)
        sales = SalesGenerator(self.fake, catalog["products"]).generate(n_customers, n_orders, now=now)
        procurement = ProcurementGenerator(self.fake).generate(n_suppliers, n_purchase_orders, now=now)
        production = ProductionGenerator(self.fake, catalog["products"]).generate(n_production_orders, now=now)

        data = {"users": users, **catalog, **sales, **procurement, **production}

        for name, df in data.items():
            logger.debug("Generated table", table=name, rows=len(df))

        if self.output_dir is not None:
            self._save_data(data)

        return data

    def _save_data(self, data: Dict[str, pl.DataFrame]) -> None:
        """Save generated data as Parquet files"""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        for name, df in data.items():
            path = self.output_dir / f"{name}.parquet"
            df.write_parquet(path)
            logger.info("Saved generated table", table=name, rows=len(df), path=str(path))
