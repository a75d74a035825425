"""
SQLite Release Store

Architectural Intent:
- Persistent ReleaseStorePort adapter using SQLite (stdlib)
- One row per (name, revision); the release itself is stored as JSON with
  status duplicated in a column for deployed_all() lookups
- Uses WAL mode for concurrent readers

Design Decisions:
- Single database file at a configurable path (default: rewind.db)
- Table created on connect()
- The (name, revision) primary key rejects concurrent creation of the
  same revision, surfaced as ReleaseExistsError
"""

from __future__ import annotations
import json
import logging
import sqlite3
from typing import List, Optional
from rewind.domain.entities.release import Release, ReleaseStatus
from rewind.domain.errors import ReleaseExistsError, ReleaseNotFoundError, StoreError
from rewind.domain.ports.release_store_port import ReleaseStorePort
from rewind.infrastructure.repositories.retention import revisions_to_prune

logger = logging.getLogger(__name__)


class SQLiteReleaseStore(ReleaseStorePort):
    """Release persistence using SQLite."""

    def __init__(self, db_path: str = "rewind.db", max_history: int = 0):
        self._db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self.max_history = max_history

    def connect(self) -> None:
        """Open database connection and create tables."""
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS releases (
                name TEXT NOT NULL,
                revision INTEGER NOT NULL,
                status TEXT NOT NULL,
                body TEXT NOT NULL,
                PRIMARY KEY (name, revision)
            );

            CREATE INDEX IF NOT EXISTS idx_releases_status ON releases(name, status);
        """)
        logger.info("SQLite release store connected: %s", self._db_path)

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self.connect()
        assert self._conn is not None
        return self._conn

    async def get(self, name: str, revision: int) -> Release:
        row = self.conn.execute(
            "SELECT body FROM releases WHERE name = ? AND revision = ?",
            (name, revision),
        ).fetchone()
        if row is None:
            raise ReleaseNotFoundError(
                f"release: {name} revision {revision} not found",
                release_name=name,
                revision=revision,
            )
        return _load(row)

    async def last(self, name: str) -> Release:
        row = self.conn.execute(
            "SELECT body FROM releases WHERE name = ? ORDER BY revision DESC LIMIT 1",
            (name,),
        ).fetchone()
        if row is None:
            raise ReleaseNotFoundError(f"release: {name} not found", release_name=name)
        return _load(row)

    async def create(self, release: Release) -> None:
        try:
            with self.conn:
                self.conn.execute(
                    "INSERT INTO releases (name, revision, status, body) VALUES (?, ?, ?, ?)",
                    (release.name, release.revision, release.status.value, _dump(release)),
                )
        except sqlite3.IntegrityError as e:
            raise ReleaseExistsError(
                f"release: {release.name} revision {release.revision} already exists",
                release_name=release.name,
                revision=release.revision,
            ) from e
        except sqlite3.Error as e:
            raise StoreError(
                f"unable to create release {release.name}: {e}",
                release_name=release.name,
                revision=release.revision,
            ) from e
        self._prune(release)

    async def update(self, release: Release) -> None:
        try:
            with self.conn:
                cursor = self.conn.execute(
                    "UPDATE releases SET status = ?, body = ? WHERE name = ? AND revision = ?",
                    (release.status.value, _dump(release), release.name, release.revision),
                )
        except sqlite3.Error as e:
            raise StoreError(
                f"unable to update release {release.name}: {e}",
                release_name=release.name,
                revision=release.revision,
            ) from e
        if cursor.rowcount == 0:
            raise ReleaseNotFoundError(
                f"release: {release.name} revision {release.revision} not found",
                release_name=release.name,
                revision=release.revision,
            )

    async def deployed_all(self, name: str) -> List[Release]:
        rows = self.conn.execute(
            "SELECT body FROM releases WHERE name = ? AND status = ? ORDER BY revision",
            (name, ReleaseStatus.DEPLOYED.value),
        ).fetchall()
        return [_load(r) for r in rows]

    async def history(self, name: str) -> List[Release]:
        rows = self.conn.execute(
            "SELECT body FROM releases WHERE name = ? ORDER BY revision",
            (name,),
        ).fetchall()
        return [_load(r) for r in rows]

    def _prune(self, created: Release) -> None:
        if self.max_history <= 0:
            return
        rows = self.conn.execute(
            "SELECT body FROM releases WHERE name = ?", (created.name,)
        ).fetchall()
        pruned = revisions_to_prune(
            [_load(r) for r in rows], self.max_history, created.revision
        )
        if not pruned:
            return
        with self.conn:
            self.conn.executemany(
                "DELETE FROM releases WHERE name = ? AND revision = ?",
                [(created.name, revision) for revision in pruned],
            )
        logger.debug("pruned %s revisions %s beyond max history", created.name, pruned)


def _dump(release: Release) -> str:
    return json.dumps(release.to_dict())


def _load(row: sqlite3.Row) -> Release:
    return Release.from_dict(json.loads(row["body"]))
