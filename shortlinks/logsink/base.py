"""
Abstract Base Class for log sinks.

Responsibilities:
    - Define the fire-and-forget `log` entry point used by the manager and routes
    - Define the blocking `send` primitive each backend implements
    - Validate levels before anything is dispatched

Subclasses only implement `send`. `log` dispatches it without making the
caller wait; the base version runs it inline and wraps the result in an
already-completed future, which is what in-process sinks want.

LLM Prompt Example:
    "Create an abstract base class for an event sink where a slow or failing
    backend can never change the outcome of the operation that emitted the event."
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Optional

from .models import LOG_LEVELS, LogRequest, LogResponse

__all__ = ["BaseLogSink"]


class BaseLogSink(ABC):
    """Abstract base for pluggable log sinks."""

    def build_request(self, stack: str, level: str, package: str, message: str) -> LogRequest:
        """
        Build a validated LogRequest.

        Raises:
            ValueError: If `level` is not one of INFO, WARN, ERROR, DEBUG.
        """
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")
        return LogRequest(stack=stack, level=level, package_name=package, message=message)

    def log(self, stack: str, level: str, package: str, message: str) -> "Future[Optional[LogResponse]]":
        """
        Dispatch an event without coupling the caller to its outcome.

        Returns:
            Future resolving to the collector's acknowledgment, or None on any failure.
        """
        request = self.build_request(stack, level, package, message)
        future: "Future[Optional[LogResponse]]" = Future()
        future.set_result(self.send(request))
        return future

    @abstractmethod
    def send(self, request: LogRequest) -> Optional[LogResponse]:  # pragma: no cover
        """
        Deliver one event and wait for the acknowledgment.

        Must never raise for delivery failures; return None instead.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release background resources (no-op for in-process sinks)."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
