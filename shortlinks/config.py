"""
Runtime configuration for Shortlinks
====================================

Simple settings module that reads from environment variables (only here),
and exposes a stable `settings` object for the rest of the codebase.
Avoid reading env vars anywhere else; import from this module instead.
(The store factory is the one exception: it re-reads the store variables
lazily and falls back to these settings.)

Storage
-------
- SHORTLINKS_STORE_BACKEND : "memory" (default), "file" or "sqlite"
- SHORTLINKS_STORE_PATH    : path used by the file/sqlite backends; empty picks
                             "shortlinks.json" (file) or "shortlinks.db" (sqlite)
- SHORTLINKS_STORAGE_KEY   : key holding the serialized mapping collection

Links
-----
- SHORTLINKS_BASE_URL          : prefix of generated short links
- SHORTLINKS_DEFAULT_VALIDITY  : minutes a mapping stays live (default 30)
- SHORTLINKS_CODE_LENGTH       : generated code length; default 6; clamped to [3, 10]
- SHORTLINKS_MAX_ATTEMPTS      : collision retries per code length (default 16)
- SHORTLINKS_ALLOWED_SCHEMES   : comma list of URL schemes; empty accepts any scheme

Remote logging
--------------
- SHORTLINKS_LOG_ENDPOINT : URL of the log collector
- SHORTLINKS_LOG_ENABLED  : "false" disables remote logging
- SHORTLINKS_LOG_TIMEOUT  : seconds per POST (default 5.0)
- SHORTLINKS_LOG_MAX_PENDING : events queued for the collector before new ones are dropped (default 100)
- SHORTLINKS_LOG_LEVEL    : level of the local stdlib logger (default INFO)
"""

import os
from typing import FrozenSet

DEFAULT_LOG_ENDPOINT = "http://20.244.56.144/evaluation-service/logs"
DEFAULT_STORE_PATHS = {"file": "shortlinks.json", "sqlite": "shortlinks.db"}


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        return float(raw)
    except ValueError:
        return default


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


def _get_schemes(name: str) -> FrozenSet[str]:
    raw = os.getenv(name, "")
    return frozenset(s.strip().lower() for s in raw.split(",") if s.strip())


class _Settings:
    # -------- Storage --------
    STORE_BACKEND: str = os.getenv("SHORTLINKS_STORE_BACKEND", "memory").strip().lower()
    STORE_PATH: str = os.getenv("SHORTLINKS_STORE_PATH", "")
    STORAGE_KEY: str = os.getenv("SHORTLINKS_STORAGE_KEY", "url_mappings")

    # -------- Links --------
    BASE_URL: str = os.getenv("SHORTLINKS_BASE_URL", "http://localhost:8000")
    DEFAULT_VALIDITY: int = max(0, _get_int("SHORTLINKS_DEFAULT_VALIDITY", 30))

    # Codes must stay inside the custom-code format, so the length is clamped to [3, 10]
    CODE_LENGTH: int = max(3, min(10, _get_int("SHORTLINKS_CODE_LENGTH", 6)))
    MAX_ATTEMPTS: int = max(1, _get_int("SHORTLINKS_MAX_ATTEMPTS", 16))

    ALLOWED_SCHEMES: FrozenSet[str] = _get_schemes("SHORTLINKS_ALLOWED_SCHEMES")

    # -------- Remote logging --------
    LOG_ENDPOINT: str = os.getenv("SHORTLINKS_LOG_ENDPOINT", DEFAULT_LOG_ENDPOINT)
    LOG_ENABLED: bool = _get_bool("SHORTLINKS_LOG_ENABLED", True)
    LOG_TIMEOUT: float = _get_float("SHORTLINKS_LOG_TIMEOUT", 5.0)
    LOG_MAX_PENDING: int = max(1, _get_int("SHORTLINKS_LOG_MAX_PENDING", 100))
    LOG_LEVEL: str = os.getenv("SHORTLINKS_LOG_LEVEL", "INFO").strip().upper()


settings = _Settings()
