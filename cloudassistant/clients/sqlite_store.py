"""SQLite-backed key-value store for tokens, sessions and OAuth state."""

from __future__ import annotations

import sqlite3
import time
from pathlib import Path
from typing import Callable, Optional


class SQLiteStore:
    """Simple key-value store with optional per-key expiry.

    Each ``put`` is a single upsert, so concurrent handlers writing the same
    key resolve to last-write-wins without corrupting the row.
    """

    def __init__(self, db_path: str, clock: Callable[[], float] = time.time) -> None:
        self._db_path = Path(db_path)
        self._clock = clock
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False, timeout=5.0)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_entries (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    expires_at REAL
                )
                """
            )

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        if not key:
            raise ValueError("Key must be a non-empty string")
        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO kv_entries (key, value, expires_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    expires_at = excluded.expires_at
                """,
                (key, value, expires_at),
            )

    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value, expires_at FROM kv_entries WHERE key = ?",
                (key,),
            ).fetchone()
        if not row:
            return None
        if row["expires_at"] is not None and row["expires_at"] <= self._clock():
            self.delete(key)
            return None
        return row["value"]

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))

    def pop(self, key: str) -> Optional[str]:
        """Delete ``key`` and return its live value in one statement."""
        with self._connect() as conn:
            row = conn.execute(
                "DELETE FROM kv_entries WHERE key = ? RETURNING value, expires_at",
                (key,),
            ).fetchone()
        if not row:
            return None
        if row["expires_at"] is not None and row["expires_at"] <= self._clock():
            return None
        return row["value"]

    def purge_expired(self) -> int:
        """Remove expired rows and return how many were deleted."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM kv_entries WHERE expires_at IS NOT NULL AND expires_at <= ?",
                (self._clock(),),
            )
        return cursor.rowcount


__all__ = ["SQLiteStore"]
