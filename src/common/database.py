"""SQLite key/value storage for Story Engine.

The app keeps two kinds of user-local state: the API credential and the
collection of generated stories. Both live in a single ``settings`` table
keyed by a fixed setting name, mirroring a simple preferences store.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .config import settings

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


def get_connection(db_path: str | None = None) -> sqlite3.Connection:
    """Get a SQLite connection with row factory enabled."""
    path = db_path or settings.storage.db_path
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_db(db_path: str | None = None) -> None:
    """Create all tables if they don't exist."""
    conn = get_connection(db_path)
    try:
        conn.executescript(_CREATE_TABLES_SQL)
        conn.commit()
    finally:
        conn.close()


class KeyValueStore:
    """Persistent string settings keyed by name.

    Usage:
        kv = KeyValueStore()
        kv.set("deepseek_api_key", "sk-...")
        kv.get("deepseek_api_key")
    """

    def __init__(self, db_path: str | None = None) -> None:
        self.db_path = db_path or settings.storage.db_path
        init_db(self.db_path)

    def get(self, key: str) -> str | None:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                "SELECT value FROM settings WHERE key = ?", (key,)
            ).fetchone()
        finally:
            conn.close()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                "INSERT INTO settings (key, value, updated_at) "
                "VALUES (?, ?, CURRENT_TIMESTAMP) "
                "ON CONFLICT(key) DO UPDATE SET "
                "value = excluded.value, updated_at = excluded.updated_at",
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, key: str) -> bool:
        """Remove a setting. Returns True if a row was deleted."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("DELETE FROM settings WHERE key = ?", (key,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()
