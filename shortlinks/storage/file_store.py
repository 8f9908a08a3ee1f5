"""
FileStore – JSON-file key-value store
=====================================

Persists every key of the store in one JSON object on disk, the local
equivalent of a browser profile's storage area:

    {"url_mappings": "[{\"shortcode\": \"abc123\", ...}]"}

Key Design Points
-----------------
- **Full rewrite**: each `write` rewrites the whole document through a
  temporary file in the same directory followed by `os.replace`, so readers
  see either the old or the new document, never a partial one.
- **Missing file**: behaves like an empty store.
- **Single writer**: there is no locking. Two processes writing the same
  file race and the last one wins.

Example
-------
>>> store = FileStore("shortlinks.json")
>>> store.write("url_mappings", "[]")
>>> store.read("url_mappings")
'[]'
"""

import json
import os
import tempfile
from typing import Dict, Optional

from ..errors import StorageError
from .base import BaseStore


class FileStore(BaseStore):
    """Key-value store backed by a single JSON file.

    Parameters
    ----------
    path : str
        Location of the JSON document. Parent directories are created on first write.
    """

    def __init__(self, path: str) -> None:
        self.path = os.path.abspath(path)

    # ---- Internal helpers -------------------------------------------------

    def _load(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                doc = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(doc, dict):
            raise StorageError(f"Unexpected document in {self.path}: expected an object")
        return doc

    def _dump(self, doc: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".shortlinks-", suffix=".tmp", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(doc, fh)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    # ---- Contract methods -------------------------------------------------

    def read(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def write(self, key: str, value: str) -> None:
        doc = self._load()
        doc[key] = value
        self._dump(doc)
