"""
MappingRepository – the mapping collection on top of a key-value store.

Responsibilities:
    - Load the whole collection from one key (missing key -> empty list)
    - Save the whole collection back as a JSON array (full replacement)
    - Absorb storage and serialization faults: log them, return a default
    - Drop individual records that fail validation, keeping the rest

Design:
    - Every call does a full read or a full write; there are no partial
      updates and no cache between calls.
    - Faults are reported locally and to the log sink, then converted to an
      empty collection (load) or False (save). They never reach the manager's
      caller.
"""

import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from ..errors import StorageError
from ..logsink.base import BaseLogSink
from ..models import Mapping
from .base import BaseStore

logger = logging.getLogger(__name__)

DEFAULT_KEY = "url_mappings"


class MappingRepository:
    def __init__(self, store: BaseStore, key: str = DEFAULT_KEY, log_sink: Optional[BaseLogSink] = None):
        self.store = store
        self.key = key
        self.log_sink = log_sink

    def _report(self, message: str) -> None:
        logger.error(message)
        if self.log_sink is not None:
            self.log_sink.log("backend", "ERROR", "repository", message)

    def load(self) -> List[Mapping]:
        """
        Return every stored mapping in insertion order.

        Returns:
            List[Mapping]: Empty when the key is missing or unreadable; records
            that fail validation are reported and left out.
        """
        try:
            raw = self.store.read(self.key)
        except StorageError as exc:
            self._report(f"Failed to retrieve stored mappings: {exc}")
            return []
        if raw is None:
            return []
        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError("stored mappings are not a list")
        except ValueError as exc:
            self._report(f"Failed to retrieve stored mappings: {exc}")
            return []

        mappings = []
        for i, record in enumerate(records):
            try:
                mappings.append(Mapping.model_validate(record))
            except ValidationError as exc:
                self._report(f"Dropped invalid stored mapping at index {i}: {exc.errors()[0]['msg']}")
        return mappings

    def save(self, mappings: List[Mapping]) -> bool:
        """
        Replace the stored collection.

        Returns:
            bool: True on success, False if the store rejected the write.
        """
        try:
            payload = json.dumps([m.to_record() for m in mappings])
            self.store.write(self.key, payload)
        except (StorageError, TypeError, ValueError) as exc:
            self._report(f"Failed to save mappings to storage: {exc}")
            return False
        return True
