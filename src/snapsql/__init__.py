"""
snapsql public package initialization.

PostgreSQL-dialect statements executed against an in-memory SQLite engine
whose full image is persisted to a snapshot file after every write.
"""

from .adapters import AdapterConfig, QueryResult, SQLiteAdapter  # noqa: F401
from .errors import (  # noqa: F401
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterError,
    AdapterExecutionError,
    BindingMismatchError,
    PersistenceError,
    TranslationError,
)
from .persistence import Database, SnapshotStore  # noqa: F401
from .schema import SchemaBootstrapper  # noqa: F401
from .translation import TranslatedStatement, Translator, expand_params  # noqa: F401

__all__ = [
    "AdapterConfig",
    "Database",
    "QueryResult",
    "SQLiteAdapter",
    "SchemaBootstrapper",
    "SnapshotStore",
    "TranslatedStatement",
    "Translator",
    "expand_params",
    "AdapterError",
    "AdapterConfigurationError",
    "AdapterConnectionError",
    "AdapterExecutionError",
    "BindingMismatchError",
    "PersistenceError",
    "TranslationError",
]
