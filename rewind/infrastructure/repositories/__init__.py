"""Release store adapters."""

from rewind.infrastructure.repositories.memory_release_store import InMemoryReleaseStore
from rewind.infrastructure.repositories.sqlite_release_store import SQLiteReleaseStore

__all__ = ["InMemoryReleaseStore", "SQLiteReleaseStore"]
