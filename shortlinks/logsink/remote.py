"""
RemoteLogSink – HTTP log collector client
=========================================

Posts LogRequest bodies to a fixed collector endpoint with `requests`.

Key Design Points
-----------------
- **Fire-and-forget**: `log()` hands the POST to a small thread pool and
  returns the Future immediately. Nothing on a request path waits on it.
- **Absorbed failures**: network errors, timeouts, non-2xx statuses and
  unparseable bodies all collapse to `None`. The sink never raises to its
  caller for delivery problems.
- **No retries**: one attempt per event, bounded by `timeout`.
- **Bounded backlog**: at most `max_pending` events are queued or in flight;
  the rest are dropped. `close()` cancels whatever is still queued and does
  not wait for a POST already on the wire.
- **Ordering**: events are posted in submission order by a single worker by
  default, but their completion is not ordered against the operation that
  emitted them.

Example
-------
>>> with RemoteLogSink("http://collector.local/logs") as sink:
...     sink.log("backend", "INFO", "service", "URL shortened successfully")
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

import requests

from .base import BaseLogSink
from .models import LogRequest, LogResponse

logger = logging.getLogger(__name__)


class RemoteLogSink(BaseLogSink):
    """Log sink that POSTs JSON events to a remote collector.

    Parameters
    ----------
    endpoint : str
        Collector URL.
    timeout : float
        Seconds allowed per POST (connect + read).
    session : requests.Session, optional
        Shared session; one is created when omitted.
    max_workers : int
        Size of the dispatch pool. Keep at 1 to post in submission order.
    max_pending : int
        Events allowed to wait for or occupy a worker. Further events are
        dropped (their Future resolves to None) until the backlog drains.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
        max_workers: int = 1,
        max_pending: int = 100,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()
        self.max_pending = max(1, max_pending)
        self._pending = 0
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="shortlinks-log")

    @staticmethod
    def _dropped() -> "Future[Optional[LogResponse]]":
        future: "Future[Optional[LogResponse]]" = Future()
        future.set_result(None)
        return future

    def _release(self, _future: Future) -> None:
        with self._lock:
            self._pending -= 1

    def log(self, stack: str, level: str, package: str, message: str) -> "Future[Optional[LogResponse]]":
        request = self.build_request(stack, level, package, message)
        with self._lock:
            if self._pending >= self.max_pending:
                logger.debug("Log backlog full, dropping event: %s", request.message)
                return self._dropped()
            try:
                future = self._executor.submit(self.send, request)
            except RuntimeError:
                # Pool already shut down: behave like any other delivery failure.
                logger.debug("Log sink closed, dropping event: %s", request.message)
                return self._dropped()
            self._pending += 1
        future.add_done_callback(self._release)
        return future

    def send(self, request: LogRequest) -> Optional[LogResponse]:
        """POST one event and parse the acknowledgment; None on any failure."""
        try:
            resp = self.session.post(
                self.endpoint,
                json=request.model_dump(by_alias=True),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return LogResponse.model_validate(resp.json())
        except (requests.RequestException, ValueError) as exc:
            # ValueError covers JSON decoding and pydantic validation failures.
            logger.debug("Remote log delivery failed: %s", exc)
            return None

    def close(self) -> None:
        """Stop accepting events and cancel queued ones without waiting for in-flight POSTs."""
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.session.close()
