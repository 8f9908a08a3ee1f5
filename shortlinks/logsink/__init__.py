from .base import BaseLogSink
from .memory import MemoryLogSink, NullLogSink
from .models import LOG_LEVELS, LogRequest, LogResponse
from .remote import RemoteLogSink


def get_log_sink(enabled=None, endpoint=None, timeout=None) -> BaseLogSink:
    """Return the sink selected by settings: RemoteLogSink, or NullLogSink when disabled."""
    from shortlinks.config import settings

    enabled = settings.LOG_ENABLED if enabled is None else enabled
    if not enabled:
        return NullLogSink()
    return RemoteLogSink(
        endpoint or settings.LOG_ENDPOINT,
        timeout=settings.LOG_TIMEOUT if timeout is None else timeout,
        max_pending=settings.LOG_MAX_PENDING,
    )


__all__ = [
    "BaseLogSink",
    "LOG_LEVELS",
    "LogRequest",
    "LogResponse",
    "MemoryLogSink",
    "NullLogSink",
    "RemoteLogSink",
    "get_log_sink",
]
