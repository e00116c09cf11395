"""
Process-wide owner of the engine handle.
"""

from __future__ import annotations

import atexit
import os
from threading import RLock
from typing import TYPE_CHECKING, Any, Optional, Sequence

from ..adapters.base import AdapterConfig, DatabaseAdapter, QueryResult
from ..adapters.sqlite import SQLiteAdapter
from ..errors import AdapterConfigurationError, AdapterError
from ..translation.translator import Translator
from ..utils import get_logger
from .snapshot import SnapshotStore

if TYPE_CHECKING:
    from ..schema.bootstrap import SchemaBootstrapper


class Database:
    """
    Explicit owner of the single engine handle, shared by reference with callers.

    The handle is opened lazily on first use. Every call into the adapter runs
    under one re-entrant lock, so a write, its snapshot flush and an emulated
    RETURNING follow-up are never interleaved with another caller's statement.
    """

    def __init__(
        self,
        config: Optional[AdapterConfig] = None,
        *,
        adapter: Optional[DatabaseAdapter] = None,
        flush_on_exit: bool = True,
    ) -> None:
        self.config = config or AdapterConfig.from_env()
        snapshot_file = self.config.snapshot_file
        self.snapshot: SnapshotStore | None = SnapshotStore(snapshot_file) if snapshot_file else None
        if adapter is None:
            translator = Translator(returning_columns=self.config.returning_columns)
            adapter = SQLiteAdapter(
                snapshot=self.snapshot,
                translator=translator,
                slow_query_ms=self.config.slow_query_ms,
            )
        self.adapter: DatabaseAdapter = adapter
        self.flush_on_exit = flush_on_exit
        self._lock = RLock()
        self._open = False
        self._exit_hook_registered = False
        self.logger = get_logger("persistence.database")

    # ------------------------------------------------------------------ #
    # Context management
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "Database":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        with self._lock:
            if self._open:
                return
            self.adapter.connect(self.config)
            self._open = True
            if self.flush_on_exit and not self._exit_hook_registered:
                atexit.register(self._flush_at_exit)
                self._exit_hook_registered = True

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
        """
        Run one caller-dialect statement and return its rows.
        """

        with self._lock:
            self.open()
            return self.adapter.execute(sql, list(params or ()))

    def run_script(self, statements: Sequence[str]) -> None:
        with self._lock:
            self.open()
            self.adapter.run_script(statements)

    def bootstrap(self, schema: str | os.PathLike[str] | None = None) -> int:
        """
        Apply schema DDL given as text, or from ``schema`` / ``config.schema_path`` when a path.
        """

        bootstrapper = self.bootstrapper()
        if schema is None:
            if not self.config.schema_path:
                raise AdapterConfigurationError("No schema supplied and config.schema_path is not set.")
            return bootstrapper.bootstrap_file(self.config.schema_path)
        if isinstance(schema, os.PathLike):
            return bootstrapper.bootstrap_file(schema)
        return bootstrapper.bootstrap(schema)

    def bootstrapper(self) -> "SchemaBootstrapper":
        from ..schema.bootstrap import SchemaBootstrapper

        return SchemaBootstrapper(self)

    def flush(self) -> None:
        with self._lock:
            if self._open:
                self.adapter.flush()

    def close(self) -> None:
        with self._lock:
            if not self._open:
                return
            try:
                self.adapter.flush()
            finally:
                self.adapter.close()
                self._open = False
                if self._exit_hook_registered:
                    atexit.unregister(self._flush_at_exit)
                    self._exit_hook_registered = False

    # ------------------------------------------------------------------ #
    def _flush_at_exit(self) -> None:
        try:
            self.flush()
        except AdapterError:
            self.logger.exception("Final snapshot flush at exit failed")
