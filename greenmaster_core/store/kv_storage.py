# =============================================================================
# greenmaster_core/store/kv_storage.py
# Durable key/value slots backed by SQLite
# =============================================================================
"""
KeyValueStorage - the durable local storage behind the Local Mirror Store,
the persisted session and form drafts.

One table, ``slots(key, value, updated_at)``; values are JSON. Connections are
thread-local.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Union

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS slots (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
"""


class KeyValueStorage:
    """SQLite-backed named slots holding JSON values."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        with self.transaction() as conn:
            conn.execute(SCHEMA)
        logger.info(f"Local storage initialized at: {self.db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            self._local.connection = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    @contextmanager
    def transaction(self):
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value of a slot, or ``default`` if never written."""
        row = self._get_connection().execute(
            "SELECT value FROM slots WHERE key = ?", [key]
        ).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning(f"Slot {key} holds unreadable data, treating as empty")
            return default

    def set(self, key: str, value: Any) -> None:
        """Replace a slot's value. Errors propagate; nothing is partially written."""
        payload = json.dumps(value, ensure_ascii=False)
        with self.transaction() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO slots (key, value, updated_at) VALUES (?, ?, ?)",
                [key, payload, datetime.now().isoformat()],
            )

    def delete(self, key: str) -> None:
        with self.transaction() as conn:
            conn.execute("DELETE FROM slots WHERE key = ?", [key])

    def keys(self, prefix: str = "") -> List[str]:
        rows = self._get_connection().execute(
            "SELECT key FROM slots WHERE key LIKE ? ORDER BY key", [prefix + "%"]
        ).fetchall()
        return [row["key"] for row in rows]

    def close(self) -> None:
        """Close this thread's connection."""
        conn: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None
