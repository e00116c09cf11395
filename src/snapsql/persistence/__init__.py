"""
Persistence layer components: the database owner and its snapshot store.
"""

from .database import Database
from .snapshot import SnapshotStore

__all__ = ["Database", "SnapshotStore"]
