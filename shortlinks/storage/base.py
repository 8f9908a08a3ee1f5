"""
Base store interface for Shortlinks.

Purpose:
    Define the smallest contract a persistence surface needs: a synchronous
    key-value store with exactly two primitives, `read` and `write`. The whole
    mapping collection lives under one key as a serialized blob, so backends
    never see individual records.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.

LLM Prompt Example:
    "Show how a two-method storage interface lets business logic run against
    an in-memory fake in tests and a file or SQLite store in production."
"""

from abc import ABC, abstractmethod
from typing import Optional


class BaseStore(ABC):
    """Abstract base class for key-value stores."""

    @abstractmethod  # pragma: no cover
    def read(self, key: str) -> Optional[str]:
        """
        Return the value stored under `key`, or None if the key is missing.

        Raises:
            StorageError: If the backend cannot be read.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def write(self, key: str, value: str) -> None:
        """
        Replace the value under `key` in full.

        Raises:
            StorageError: If the backend rejects the write (I/O, quota, lock).
        """
        raise NotImplementedError
