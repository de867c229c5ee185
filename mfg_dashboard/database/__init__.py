"""
Database Module
"""
from .connection import (
    DatabaseNotInitializedError,
    init_database,
    close_database,
    create_schema,
    create_session_factory,
    get_db_dependency,
    get_session_factory,
    read_session,
)
from .models import Base

__all__ = [
    "DatabaseNotInitializedError",
    "init_database",
    "close_database",
    "create_schema",
    "create_session_factory",
    "get_db_dependency",
    "get_session_factory",
    "read_session",
    "Base",
]
