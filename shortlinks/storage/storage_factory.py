"""
Store factory – switch persistence backend from config (lazy env version)
=========================================================================

This module centralizes selection of the store backend so the manager can
stay ignorant of where the mapping collection lives.

- Reads environment **at call time** to avoid stale values in tests.
- Unset variables fall back to `settings`, then to per-backend default paths.
- Imports the file/SQLite backends only when they are selected.

Environment variables
---------------------
- SHORTLINKS_STORE_BACKEND: "memory" (default), "file" or "sqlite"
- SHORTLINKS_STORE_PATH:    path for the file/sqlite backends
"""

import logging
import os
from typing import Optional

from shortlinks.config import DEFAULT_STORE_PATHS, settings
from shortlinks.storage.base import BaseStore
from shortlinks.storage.memory_store import MemoryStore

logger = logging.getLogger(__name__)


def get_store(backend: Optional[str] = None, **kwargs) -> BaseStore:
    """
    Return a BaseStore implementation based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory", "file" or "sqlite". If omitted, reads SHORTLINKS_STORE_BACKEND,
        then settings.STORE_BACKEND.
    kwargs : dict
        Extra args for the backend. File and sqlite accept path="...".

    Raises
    ------
    ValueError
        For an unknown backend name.
    """
    be = (backend or os.getenv("SHORTLINKS_STORE_BACKEND") or settings.STORE_BACKEND).strip().lower()
    logger.info("Selected store backend: %r", be)

    if be == "memory":
        return MemoryStore()

    path = kwargs.get("path") or os.getenv("SHORTLINKS_STORE_PATH") or settings.STORE_PATH

    if be == "file":
        from shortlinks.storage.file_store import FileStore
        return FileStore(path or DEFAULT_STORE_PATHS["file"])

    if be == "sqlite":
        from shortlinks.storage.db_store import SQLiteStore
        return SQLiteStore(path or DEFAULT_STORE_PATHS["sqlite"])

    raise ValueError(f"Unknown store backend: {be!r}")
