"""
In-process log sinks.

MemoryLogSink keeps every event in order, which makes it the natural test
double for the remote collector. NullLogSink drops events when remote
logging is switched off.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from .base import BaseLogSink
from .models import LogRequest, LogResponse


class MemoryLogSink(BaseLogSink):
    def __init__(self):
        """
        Initialize an empty event list.

        events structure:
            [LogRequest(stack=..., level=..., package_name=..., message=...), ...]
        """
        self.events: List[LogRequest] = []

    def send(self, request: LogRequest) -> Optional[LogResponse]:
        self.events.append(request)
        return LogResponse(
            log_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc).isoformat(),
            status="success",
        )

    def messages(self, level: Optional[str] = None) -> List[str]:
        """Return recorded messages, optionally only those at `level`."""
        return [e.message for e in self.events if level is None or e.level == level]


class NullLogSink(BaseLogSink):
    """Accepts every event and delivers none of them."""

    def send(self, request: LogRequest) -> Optional[LogResponse]:
        return None
