"""Flat key-value slots backed by the kv_store table."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .schema import ensure_schema


class KeyValueStore:
    """Manages the kv_store table. Values are opaque strings."""

    def __init__(self, db_path: str | Path = "~/.config/fridgeai/history.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get(self, key: str) -> str | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """Overwrite the value stored under ``key``."""
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO kv_store (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET
                   value = excluded.value,
                   updated_at = datetime('now', 'localtime')""",
            (key, value),
        )
        conn.commit()

    def delete(self, key: str) -> bool:
        conn = self._get_conn()
        cur = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        conn.commit()
        return cur.rowcount > 0
