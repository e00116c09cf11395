"""
Adapter protocol and configuration for snapsql.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

from ..dialects.base import Dialect
from ..errors import AdapterConfigurationError
from ..utils.performance import SLOW_QUERY_ENV, parse_slow_query_ms

DEFAULT_SNAPSHOT_PATH = os.path.join("data", "app.sqlite3")
MEMORY_URLS = (":memory:", "sqlite:///:memory:", "")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: str, *, key: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise AdapterConfigurationError(f"Invalid boolean value for '{key}': {value!r}")


def _parse_columns(value: str, *, key: str) -> tuple[str, ...]:
    columns = tuple(part.strip() for part in value.split(",") if part.strip())
    if not columns:
        raise AdapterConfigurationError(f"'{key}' must name at least one column: {value!r}")
    return columns


@dataclass(frozen=True)
class QueryResult:
    """
    Rows produced by a statement. Writes return no rows unless RETURNING was emulated.
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = -1

    def first(self) -> dict[str, Any] | None:
        return self.rows[0] if self.rows else None


@dataclass
class AdapterConfig:
    """
    Normalized configuration for the adapter and its snapshot file.
    """

    snapshot_path: str | None = DEFAULT_SNAPSHOT_PATH
    schema_path: str | None = None
    returning_columns: tuple[str, ...] = ("id",)
    slow_query_ms: int | None = None
    foreign_keys: bool = True
    source: str | None = None

    def __post_init__(self) -> None:
        if not self.returning_columns:
            raise AdapterConfigurationError("returning_columns must name at least one column")
        if self.slow_query_ms is not None and self.slow_query_ms < 0:
            raise AdapterConfigurationError(
                f"slow_query_ms must be non-negative, got {self.slow_query_ms}"
            )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "AdapterConfig":
        """
        Build a config from ``SQLITE_PATH``, ``SCHEMA_PATH`` and ``SNAPSQL_*`` variables.

        Explicit keyword arguments win over the environment.
        """

        values: dict[str, Any] = {
            "snapshot_path": os.getenv("SQLITE_PATH") or DEFAULT_SNAPSHOT_PATH,
            "schema_path": os.getenv("SCHEMA_PATH") or None,
            "source": "environment",
        }
        raw_columns = os.getenv("SNAPSQL_RETURNING_COLUMNS")
        if raw_columns is not None:
            values["returning_columns"] = _parse_columns(
                raw_columns, key="SNAPSQL_RETURNING_COLUMNS"
            )
        raw_fk = os.getenv("SNAPSQL_FOREIGN_KEYS")
        if raw_fk is not None:
            values["foreign_keys"] = _parse_bool(raw_fk, key="SNAPSQL_FOREIGN_KEYS")
        raw_slow = os.getenv(SLOW_QUERY_ENV)
        if raw_slow:
            values["slow_query_ms"] = parse_slow_query_ms(raw_slow)
        values.update(kwargs)
        return cls(**values)

    @property
    def snapshot_file(self) -> str | None:
        """
        Filesystem path of the snapshot, or ``None`` when persistence is disabled.
        """

        if self.snapshot_path is None or self.snapshot_path in MEMORY_URLS:
            return None
        prefix = "sqlite:///"
        if self.snapshot_path.startswith(prefix):
            return self.snapshot_path[len(prefix) :]
        return self.snapshot_path

    def descriptive_label(self) -> str:
        target = self.snapshot_file or ":memory:"
        if self.source:
            return f"{self.source} ({target})"
        return target


class DatabaseAdapter(Protocol):
    """
    Adapter interface exposing the operations used by :class:`~snapsql.persistence.Database`.
    """

    dialect: Dialect
    slow_query_ms: int

    def connect(self, config: AdapterConfig) -> Any:
        """
        Open the engine handle, loading the snapshot when one exists.
        """

    def close(self) -> None:
        """
        Close underlying resources. Implementations should be idempotent.
        """

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
        """
        Translate and execute one caller-dialect statement.
        """

    def run_script(self, statements: Sequence[str]) -> None:
        """
        Execute engine-native statements as one batch followed by a single flush.
        """

    def flush(self) -> None:
        """
        Write the current engine state to durable storage.
        """
