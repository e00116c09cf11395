import logging

import pytest

from snapsql import AdapterConfig, Database, SchemaBootstrapper
from snapsql.errors import AdapterExecutionError

SCHEMA = """
-- application schema
CREATE TABLE IF NOT EXISTS users (
  id SERIAL PRIMARY KEY,
  full_name TEXT NOT NULL,
  email TEXT UNIQUE NOT NULL,
  role TEXT NOT NULL DEFAULT 'student',
  created_at TIMESTAMP DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS papers (
  id SERIAL PRIMARY KEY,
  title TEXT NOT NULL,
  uploaded_by INTEGER REFERENCES users(id) ON DELETE CASCADE,
  created_at TIMESTAMP DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_papers_title ON papers(title);
"""


@pytest.fixture
def database(tmp_path):
    database = Database(AdapterConfig(snapshot_path=str(tmp_path / "schema.sqlite3")), flush_on_exit=False)
    yield database
    database.close()


def test_statements_are_translated_and_split(database):
    statements = SchemaBootstrapper(database).statements(SCHEMA)
    assert len(statements) == 3
    assert "id INTEGER PRIMARY KEY AUTOINCREMENT" in statements[0]
    assert "created_at DATETIME DEFAULT CURRENT_TIMESTAMP" in statements[1]
    assert statements[2] == "CREATE INDEX IF NOT EXISTS idx_papers_title ON papers(title)"


def test_bootstrap_creates_usable_tables(database):
    assert database.bootstrap(SCHEMA) == 3
    user = database.execute(
        "INSERT INTO users(full_name, email) VALUES ($1, $2) RETURNING id", ["Ada", "ada@x.com"]
    ).rows[0]
    database.execute("INSERT INTO papers(title, uploaded_by) VALUES ($1, $2)", ["Calculus I", user["id"]])
    row = database.execute("SELECT role, created_at FROM users WHERE id = $1", [user["id"]]).rows[0]
    assert row["role"] == "student"
    assert row["created_at"] is not None


def test_bootstrap_is_idempotent(database):
    database.bootstrap(SCHEMA)
    database.execute("INSERT INTO users(full_name, email) VALUES ($1, $2)", ["Bo", "bo@x.com"])
    database.bootstrap(SCHEMA)
    assert database.execute("SELECT COUNT(*) AS n FROM users").rows == [{"n": 1}]


def test_bootstrap_flushes_once(database):
    database.open()
    before = database.snapshot.flush_count
    database.bootstrap(SCHEMA)
    assert database.snapshot.flush_count == before + 1


def test_failed_bootstrap_rolls_back(database):
    with pytest.raises(AdapterExecutionError):
        database.bootstrap("CREATE TABLE a (id SERIAL PRIMARY KEY); CREATE TABLE b (;")
    rows = database.execute("SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'a'").rows
    assert rows == []


def test_bootstrap_file(tmp_path, database, caplog):
    caplog.set_level(logging.INFO, logger="snapsql.schema.bootstrap")
    schema_path = tmp_path / "schema.sql"
    schema_path.write_text(SCHEMA, encoding="utf-8")
    assert database.bootstrap(schema_path) == 3
    assert any("Bootstrapped schema" in record.message for record in caplog.records)


def test_empty_schema_is_a_no_op(database):
    assert database.bootstrap("-- nothing here\n") == 0
