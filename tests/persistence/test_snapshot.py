import sqlite3

import pytest

from snapsql.errors import PersistenceError
from snapsql.persistence import SnapshotStore


def _memory_connection() -> sqlite3.Connection:
    return sqlite3.connect(":memory:", isolation_level=None)


def test_load_without_file_creates_parent_directory(tmp_path):
    store = SnapshotStore(tmp_path / "nested" / "dir" / "db.sqlite3")
    connection = _memory_connection()
    assert store.load(connection) is False
    assert store.path.parent.is_dir()
    assert not store.path.exists()
    connection.close()


def test_flush_then_load_round_trips(tmp_path):
    store = SnapshotStore(tmp_path / "db.sqlite3")
    source = _memory_connection()
    source.execute("CREATE TABLE items (name TEXT)")
    source.execute("INSERT INTO items VALUES ('alpha'), ('beta')")
    store.flush(source)
    source.close()
    assert store.flush_count == 1

    target = _memory_connection()
    assert store.load(target) is True
    names = [row[0] for row in target.execute("SELECT name FROM items ORDER BY name")]
    assert names == ["alpha", "beta"]
    target.close()


def test_snapshot_is_a_regular_sqlite_file(tmp_path):
    store = SnapshotStore(tmp_path / "db.sqlite3")
    source = _memory_connection()
    source.execute("CREATE TABLE items (name TEXT)")
    source.execute("INSERT INTO items VALUES ('gamma')")
    store.flush(source)
    source.close()

    on_disk = sqlite3.connect(store.path)
    assert on_disk.execute("SELECT name FROM items").fetchall() == [("gamma",)]
    on_disk.close()


def test_flush_leaves_no_temporary_file(tmp_path):
    store = SnapshotStore(tmp_path / "db.sqlite3")
    connection = _memory_connection()
    connection.execute("CREATE TABLE t (a)")
    store.flush(connection)
    connection.close()
    assert sorted(p.name for p in tmp_path.iterdir()) == ["db.sqlite3"]


def test_flush_failure_raises_persistence_error(tmp_path, monkeypatch, caplog):
    store = SnapshotStore(tmp_path / "db.sqlite3")
    connection = _memory_connection()
    connection.execute("CREATE TABLE t (a)")

    def fail(data):
        raise OSError("disk full")

    monkeypatch.setattr(store, "_write", fail)
    with pytest.raises(PersistenceError) as excinfo:
        store.flush(connection)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert excinfo.value.path == str(store.path)
    assert store.flush_count == 0
    assert any("Snapshot flush" in record.message for record in caplog.records)
    connection.close()


def test_empty_snapshot_file_starts_empty(tmp_path):
    path = tmp_path / "db.sqlite3"
    path.write_bytes(b"")
    store = SnapshotStore(path)
    connection = _memory_connection()
    assert store.load(connection) is False
    connection.close()


def test_corrupt_snapshot_raises_persistence_error(tmp_path):
    path = tmp_path / "db.sqlite3"
    path.write_bytes(b"definitely not a database image" * 200)
    store = SnapshotStore(path)
    connection = _memory_connection()
    with pytest.raises(PersistenceError):
        store.load(connection)
    connection.close()
