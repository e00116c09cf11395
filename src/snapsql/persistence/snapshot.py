"""
Full-image snapshot persistence for the in-memory SQLite engine.
"""

from __future__ import annotations

import os
import sqlite3
from pathlib import Path

from ..errors import PersistenceError
from ..utils import get_logger


class SnapshotStore:
    """
    Owns the single snapshot file holding a serialized image of the database.

    Every flush rewrites the whole image, so its cost grows with total data size
    rather than with the size of the change.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self.flush_count = 0
        self.logger = get_logger("persistence.snapshot")

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self, connection: sqlite3.Connection) -> bool:
        """
        Replace the contents of ``connection`` with the stored image, if any.

        Returns ``True`` when a snapshot was loaded. The parent directory is
        created when missing so later flushes have somewhere to land.
        """

        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.exists():
            self.logger.info("No snapshot at %s; starting with an empty database", self.path)
            return False
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            raise PersistenceError("Failed to read snapshot", path=str(self.path)) from exc
        if not data:
            self.logger.warning("Snapshot at %s is empty; starting with an empty database", self.path)
            return False
        try:
            connection.deserialize(data)
            connection.execute("PRAGMA schema_version").fetchone()
        except sqlite3.DatabaseError as exc:
            raise PersistenceError("Snapshot is not a valid SQLite image", path=str(self.path)) from exc
        self.logger.info("Loaded snapshot %s (%d bytes)", self.path, len(data))
        return True

    def flush(self, connection: sqlite3.Connection) -> None:
        """
        Serialize the entire database and overwrite the snapshot file.

        The image is written to a sibling temporary file and moved into place,
        so readers never observe a partially written snapshot.
        """

        data = connection.serialize()
        try:
            self._write(data)
        except OSError as exc:
            self.logger.error("Snapshot flush to %s failed: %s", self.path, exc)
            raise PersistenceError("Failed to write snapshot", path=str(self.path)) from exc
        self.flush_count += 1
        self.logger.debug("Flushed snapshot %s (%d bytes)", self.path, len(data))

    def _write(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            with open(temp_path, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, self.path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
