# file: org_runtime/store.py
"""
Roster Store — named-slot key-value persistence.

Each input table (roster, grouping, sort order, leader assignments,
cross-unit membership, member tags) lives in its own slot as one JSON
text blob. A save is a blind overwrite of the slot: last writer wins,
no versioning, no merge.

KeyValueStore is the contract; SqliteKeyValueStore the local
implementation (backend.pg_store provides the PostgreSQL one).
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

_INIT_SQL = """
CREATE TABLE IF NOT EXISTS slots (
    name        TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""


class KeyValueStore:
    """
    Synchronous named-slot store.

    get() returns None for a slot that was never written.
    """

    def get(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def put(self, name: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, name: str) -> None:
        raise NotImplementedError

    def names(self) -> List[str]:
        raise NotImplementedError

    def close(self) -> None:
        """Release resources. Default: nothing to release."""


class SqliteKeyValueStore(KeyValueStore):
    """
    Slot store backed by sqlite3 (one ``slots`` table, WAL journal).

    ``check_same_thread`` is off so one store can serve a threaded HTTP
    server; writes are single statements, each in its own transaction.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = str(db_path)
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        self._conn.executescript(_INIT_SQL)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, name: str) -> Optional[str]:
        row = self._conn.execute(
            "SELECT value FROM slots WHERE name = ?", (name,),
        ).fetchone()
        return row[0] if row else None

    def names(self) -> List[str]:
        rows = self._conn.execute("SELECT name FROM slots ORDER BY name").fetchall()
        return [r[0] for r in rows]

    def updated_at(self, name: str) -> Optional[str]:
        row = self._conn.execute(
            "SELECT updated_at FROM slots WHERE name = ?", (name,),
        ).fetchone()
        return row[0] if row else None

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def put(self, name: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO slots (name, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (name, value, now),
            )
        logger.debug("Saved slot %r (%d chars)", name, len(value))

    def delete(self, name: str) -> None:
        with self._conn:
            self._conn.execute("DELETE FROM slots WHERE name = ?", (name,))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._conn.close()
