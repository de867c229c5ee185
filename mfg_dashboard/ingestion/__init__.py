"""
Data Ingestion Module
"""
from .seed_db import coerce_record, execute_batch_insert, seed_dataset

__all__ = [
    "coerce_record",
    "execute_batch_insert",
    "seed_dataset",
]
