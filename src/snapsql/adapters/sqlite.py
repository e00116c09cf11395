"""
SQLite database adapter implementation.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

from ..dialects.sqlite import SQLiteDialect
from ..errors import AdapterConnectionError, AdapterExecutionError
from ..security.redaction import redact_params
from ..translation.tokenizer import leading_keyword, tokenize
from ..translation.translator import TranslatedStatement, Translator
from ..utils import get_logger, resolve_slow_query_ms, time_call
from .base import AdapterConfig, DatabaseAdapter, QueryResult

if TYPE_CHECKING:
    from ..persistence.snapshot import SnapshotStore

READ_KEYWORDS = ("SELECT", "PRAGMA")


def is_read_statement(sql: str) -> bool:
    """
    Classify a translated statement: ``SELECT`` and ``PRAGMA`` read, everything else writes.
    """

    return leading_keyword(tokenize(sql)) in READ_KEYWORDS


@dataclass(slots=True)
class SQLiteConnectionState:
    connection: sqlite3.Connection
    config: AdapterConfig


class SQLiteAdapter(DatabaseAdapter):
    """
    Adapter running caller-dialect statements against an in-memory sqlite3 database.

    Writes are followed by a flush of the attached :class:`SnapshotStore`; reads
    never touch it.
    """

    def __init__(
        self,
        *,
        snapshot: SnapshotStore | None = None,
        translator: Translator | None = None,
        slow_query_ms: int | None = None,
    ) -> None:
        self.dialect = SQLiteDialect()
        self.translator = translator or Translator(self.dialect)
        self.snapshot = snapshot
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)
        self._state: SQLiteConnectionState | None = None
        self.logger = get_logger("adapters.sqlite")

    # ------------------------------------------------------------------ #
    # Connection management
    # ------------------------------------------------------------------ #
    def connect(self, config: AdapterConfig) -> sqlite3.Connection:
        if self._state:
            return self._state.connection
        connection = sqlite3.connect(
            ":memory:",
            isolation_level=None,
            check_same_thread=False,
        )
        if self.snapshot is not None:
            try:
                self.snapshot.load(connection)
            except Exception:
                connection.close()
                raise
        connection.row_factory = sqlite3.Row
        connection.execute(f"PRAGMA foreign_keys = {'ON' if config.foreign_keys else 'OFF'}")
        connection.execute("PRAGMA case_sensitive_like = OFF")

        self.logger.info("Opened in-memory SQLite engine for %s", config.descriptive_label())
        self._state = SQLiteConnectionState(connection, config)
        return connection

    def close(self) -> None:
        if self._state:
            try:
                self._state.connection.close()
            finally:
                self._state = None

    def _ensure_connection(self) -> sqlite3.Connection:
        if not self._state:
            raise AdapterConnectionError("SQLiteAdapter is not connected.")
        return self._state.connection

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #
    def execute(self, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
        statement = self.translator.translate(sql, params or ())
        if statement.requires_returning:
            return self.run_returning(statement)
        return self.run(statement)

    def run(self, statement: TranslatedStatement) -> QueryResult:
        if is_read_statement(statement.sql):
            cursor = self._execute(statement, "sqlite.read")
            try:
                rows = [dict(row) for row in cursor.fetchall()]
            finally:
                cursor.close()
            return QueryResult(rows=rows)

        cursor = self._execute(statement, "sqlite.write")
        rowcount = cursor.rowcount
        cursor.close()
        self.flush()
        return QueryResult(rows=[], rowcount=rowcount)

    def run_returning(self, statement: TranslatedStatement) -> QueryResult:
        """
        Emulate ``INSERT ... RETURNING <column>`` with a follow-up last-id query.

        Callers must hold the database lock across this method so no other write
        can move ``last_insert_rowid()`` between the two steps.

        An insert that wrote no rows, such as one skipped by ``ON CONFLICT DO
        NOTHING``, returns no rows; the last id then belongs to an earlier insert.
        """

        column = statement.returning
        if column is None:
            return self.run(statement)
        written = self.run(statement)
        if written.rowcount == 0:
            return QueryResult(rows=[], rowcount=0)
        id_sql = f"{self.dialect.last_insert_id_sql()} AS {self.dialect.quote_identifier(column)}"
        cursor = self._execute(TranslatedStatement(sql=id_sql, params=()), "sqlite.last_insert_id")
        try:
            row = cursor.fetchone()
        finally:
            cursor.close()
        return QueryResult(rows=[{column: row[0]}], rowcount=written.rowcount)

    def run_script(self, statements: Sequence[str]) -> None:
        connection = self._ensure_connection()
        self.begin()
        try:
            for sql in statements:
                with time_call("sqlite.script", self.logger, sql=sql, threshold_ms=self.slow_query_ms):
                    connection.execute(sql)
        except sqlite3.Error as exc:
            self.rollback()
            self.logger.error("SQLite script error: %s", exc, extra={"sql": sql})
            raise AdapterExecutionError(str(exc), sql=sql, params=()) from exc
        except BaseException:
            self.rollback()
            raise
        self.commit()
        self.flush()

    def _execute(self, statement: TranslatedStatement, label: str) -> sqlite3.Cursor:
        connection = self._ensure_connection()
        redacted = redact_params(statement.params)
        cursor = connection.cursor()
        try:
            with time_call(
                label,
                self.logger,
                sql=statement.sql,
                params=redacted,
                threshold_ms=self.slow_query_ms,
            ):
                cursor.execute(statement.sql, statement.params)
        except sqlite3.Error as exc:
            cursor.close()
            self.logger.error(
                "SQLite query error: %s",
                exc,
                extra={"sql": statement.sql, "params": redacted},
            )
            raise AdapterExecutionError(str(exc), sql=statement.sql, params=redacted) from exc
        return cursor

    # ------------------------------------------------------------------ #
    # Transactions and durability
    # ------------------------------------------------------------------ #
    def begin(self) -> None:
        connection = self._ensure_connection()
        connection.execute("BEGIN")

    def commit(self) -> None:
        connection = self._ensure_connection()
        if connection.in_transaction:
            connection.execute("COMMIT")

    def rollback(self) -> None:
        connection = self._ensure_connection()
        if connection.in_transaction:
            connection.execute("ROLLBACK")

    def flush(self) -> None:
        if self.snapshot is None:
            return
        self.snapshot.flush(self._ensure_connection())
