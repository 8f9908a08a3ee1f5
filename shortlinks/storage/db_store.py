"""
SQLiteStore – SQLite-backed key-value store for Shortlinks
==========================================================

Stores keys in a single table of a local SQLite database file. Adheres to
the same contract as the in-memory store (see `memory_store.py`) by
implementing `BaseStore`, so you can switch backends without touching the
manager.

Schema
------
    CREATE TABLE IF NOT EXISTS kv (
        key   TEXT PRIMARY KEY,
        value TEXT NOT NULL
    );

Key Design Points
-----------------
- **Upserts**: `write` uses `INSERT ... ON CONFLICT(key) DO UPDATE`, a full
  replacement of the value.
- **Connections**: short-lived connection per call, committed on exit.
- **Errors**: any `sqlite3.Error` is re-raised as `StorageError`.

Example
-------
>>> store = SQLiteStore(path="shortlinks.db")
>>> store.write("url_mappings", "[]")
>>> store.read("url_mappings")
'[]'
"""

import contextlib
import logging
import sqlite3
from typing import Optional

from ..errors import StorageError
from .base import BaseStore

logger = logging.getLogger(__name__)

_SCHEMA = "CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)"


class SQLiteStore(BaseStore):
    """SQLite implementation of the key-value store contract.

    Parameters
    ----------
    path : str
        Database file, or ":memory:" for a throwaway database (schema is
        recreated per connection, so data does not survive between calls).
    timeout : float
        Seconds to wait on a locked database before failing.
    """

    def __init__(self, path: str, timeout: float = 5.0) -> None:
        self.path = path
        self.timeout = timeout

    # ---- Internal helpers -------------------------------------------------

    @contextlib.contextmanager
    def _conn(self):
        """Context manager yielding a connection with the schema in place."""
        logger.debug("Opening SQLite connection to %s", self.path)
        try:
            con = sqlite3.connect(self.path, timeout=self.timeout)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open {self.path}: {exc}") from exc
        try:
            con.execute(_SCHEMA)
            with con:
                yield con
        except sqlite3.Error as exc:
            raise StorageError(f"SQLite failure on {self.path}: {exc}") from exc
        finally:
            con.close()

    # ---- Contract methods -------------------------------------------------

    def read(self, key: str) -> Optional[str]:
        with self._conn() as con:
            row = con.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return row[0] if row else None

    def write(self, key: str, value: str) -> None:
        with self._conn() as con:
            con.execute(
                """
                INSERT INTO kv (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
