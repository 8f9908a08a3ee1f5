"""
In-memory store for Shortlinks.

A dict behind the BaseStore contract. It is the reference implementation
used by unit tests and the default backend, and lives only as long as the
process does.
"""

from typing import Dict, Optional

from .base import BaseStore


class MemoryStore(BaseStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value
