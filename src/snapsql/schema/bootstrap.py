"""
One-time schema bootstrap from caller-dialect DDL.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from ..translation.tokenizer import render, split_statements, tokenize
from ..translation.translator import Translator
from ..utils import get_logger

if TYPE_CHECKING:
    from ..persistence.database import Database


class SchemaBootstrapper:
    """
    Translates schema DDL and applies it as a single batch.

    No existence checks are made; the DDL is expected to use
    ``CREATE ... IF NOT EXISTS`` so repeated runs are harmless.
    """

    def __init__(self, database: "Database", translator: Optional[Translator] = None) -> None:
        self.database = database
        self.translator = translator or getattr(database.adapter, "translator", None) or Translator()
        self.logger = get_logger("schema.bootstrap")

    def statements(self, schema_sql: str) -> List[str]:
        translated = self.translator.translate_schema(schema_sql)
        return [render(tokens).strip() for tokens in split_statements(tokenize(translated))]

    def bootstrap(self, schema_sql: str) -> int:
        statements = self.statements(schema_sql)
        if not statements:
            self.logger.info("Schema is empty; nothing to bootstrap")
            return 0
        self.database.run_script(statements)
        self.logger.info("Bootstrapped schema (%d statements)", len(statements))
        return len(statements)

    def bootstrap_file(self, path: str | os.PathLike[str]) -> int:
        schema_path = Path(path)
        self.logger.info("Loading schema from %s", schema_path)
        return self.bootstrap(schema_path.read_text(encoding="utf-8"))
