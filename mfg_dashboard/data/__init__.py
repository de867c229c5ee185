"""
Data Generation Module
"""
from .generators import (
    DataGenerator,
    CatalogGenerator,
    SalesGenerator,
    ProcurementGenerator,
    ProductionGenerator,
)

__all__ = [
    "DataGenerator",
    "CatalogGenerator",
    "SalesGenerator",
    "ProcurementGenerator",
    "ProductionGenerator",
]
