"""
Exception hierarchy raised by the snapsql adapter.
"""

from __future__ import annotations

from typing import Any, Sequence


class AdapterError(RuntimeError):
    """Base error for adapter-related failures."""


class AdapterConnectionError(AdapterError):
    """Raised when the engine handle is used before it is opened."""


class AdapterConfigurationError(AdapterError):
    """Raised when configuration values are invalid."""


class TranslationError(AdapterError):
    """Raised when a statement uses a construct the translator cannot express."""


class BindingMismatchError(AdapterError):
    """Raised when a placeholder references a position outside the parameter list."""


class AdapterExecutionError(AdapterError):
    """
    Raised when the engine rejects a statement.

    ``sql`` holds the translated statement and ``params`` the bound (redacted)
    parameters. The original ``sqlite3`` error is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, sql: str, params: Sequence[Any]) -> None:
        super().__init__(f"{message} [sql={sql!r} params={list(params)!r}]")
        self.sql = sql
        self.params = list(params)


class PersistenceError(AdapterError):
    """
    Raised when writing the snapshot file fails.

    The statement that triggered the flush has already been applied in memory
    and is not rolled back.
    """

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(f"{message} (snapshot={path})")
        self.path = path
