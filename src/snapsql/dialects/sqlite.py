"""
SQLite dialect implementation.
"""

from __future__ import annotations

from typing import Final

from .base import DialectCapabilities


class SQLiteDialect:
    """
    SQLite dialect using qmark param style; RETURNING and ILIKE are emulated.
    """

    name: Final[str] = "sqlite"
    capabilities: Final[DialectCapabilities] = DialectCapabilities(
        supports_returning=False,
        supports_ilike=False,
        supports_numbered_params=False,
    )

    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace('"', '""')
        return f'"{escaped}"'

    def parameter_placeholder(self, position: int | None = None) -> str:
        return "?"

    def case_insensitive_match(self) -> tuple[str, str]:
        """
        Return the operator replacing ``ILIKE`` and the suffix placed after its operand.
        """

        return "LIKE", "COLLATE NOCASE"

    def auto_increment_primary_key(self) -> str:
        return "INTEGER PRIMARY KEY AUTOINCREMENT"

    def current_timestamp_default(self) -> str:
        return "DATETIME DEFAULT CURRENT_TIMESTAMP"

    def last_insert_id_sql(self) -> str:
        return "SELECT last_insert_rowid()"
