from snapsql.dialects import SQLiteDialect


def test_sqlite_identifier_quoting():
    dialect = SQLiteDialect()
    assert dialect.quote_identifier("table") == '"table"'
    assert dialect.quote_identifier('bad"name') == '"bad""name"'


def test_sqlite_placeholder_ignores_position():
    dialect = SQLiteDialect()
    assert dialect.parameter_placeholder() == "?"
    assert dialect.parameter_placeholder(3) == "?"


def test_sqlite_capabilities_require_emulation():
    caps = SQLiteDialect().capabilities
    assert caps.supports_returning is False
    assert caps.supports_ilike is False
    assert caps.supports_numbered_params is False


def test_sqlite_ddl_fragments():
    dialect = SQLiteDialect()
    assert dialect.case_insensitive_match() == ("LIKE", "COLLATE NOCASE")
    assert dialect.auto_increment_primary_key() == "INTEGER PRIMARY KEY AUTOINCREMENT"
    assert dialect.current_timestamp_default() == "DATETIME DEFAULT CURRENT_TIMESTAMP"
    assert dialect.last_insert_id_sql() == "SELECT last_insert_rowid()"
