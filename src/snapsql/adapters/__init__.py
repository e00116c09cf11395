"""
Database adapter interfaces and implementations.
"""

from ..errors import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterError,
    AdapterExecutionError,
    BindingMismatchError,
    PersistenceError,
    TranslationError,
)
from .base import AdapterConfig, DatabaseAdapter, QueryResult
from .sqlite import SQLiteAdapter

__all__ = [
    "AdapterConfig",
    "DatabaseAdapter",
    "QueryResult",
    "AdapterError",
    "AdapterConfigurationError",
    "AdapterConnectionError",
    "AdapterExecutionError",
    "BindingMismatchError",
    "PersistenceError",
    "TranslationError",
    "SQLiteAdapter",
]
