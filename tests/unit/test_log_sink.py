"""
Unit tests for the log sinks.

Covers:
    - Request body shape posted to the collector
    - Acknowledgment parsing
    - Every failure mode collapses to None (HTTP error, network error,
      bad JSON, unexpected body)
    - Fire-and-forget dispatch through a Future
    - Level validation, closed sink, sink selection from settings
    - Bounded backlog and a close() that does not wait on a stalled collector
"""

import threading
import time
from unittest.mock import MagicMock

import pytest
import requests

from shortlinks.logsink import MemoryLogSink, NullLogSink, RemoteLogSink, get_log_sink
from shortlinks.logsink.models import LogRequest, LogResponse

ENDPOINT = "http://collector.test/logs"
ACK = {"logID": "a1b2c3", "timestamp": "2025-01-01T12:00:00Z", "status": "success"}


def make_response(status_code=200, body=None, json_error=None):
    resp = MagicMock()
    resp.status_code = status_code
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = ACK if body is None else body
    return resp


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def sink(session):
    s = RemoteLogSink(ENDPOINT, timeout=2.5, session=session)
    yield s
    s.close()


def request(level="INFO", message="URL shortened successfully"):
    return LogRequest(stack="backend", level=level, package_name="service", message=message)


def test_send_posts_camelcase_body(sink, session):
    session.post.return_value = make_response()
    sink.send(request())

    session.post.assert_called_once()
    args, kwargs = session.post.call_args
    assert args == (ENDPOINT,)
    assert kwargs["json"] == {
        "stack": "backend",
        "level": "INFO",
        "packageName": "service",
        "message": "URL shortened successfully",
    }
    assert kwargs["timeout"] == 2.5


def test_send_parses_acknowledgment(sink, session):
    session.post.return_value = make_response()
    ack = sink.send(request())
    assert isinstance(ack, LogResponse)
    assert ack.log_id == "a1b2c3"
    assert ack.status == "success"


@pytest.mark.parametrize(
    "response",
    [
        make_response(status_code=500),
        make_response(status_code=404),
        make_response(json_error=ValueError("no json")),
        make_response(body={"unexpected": True}),
        make_response(body={**ACK, "status": "maybe"}),
    ],
)
def test_send_failures_return_none(sink, session, response):
    session.post.return_value = response
    assert sink.send(request()) is None


@pytest.mark.parametrize(
    "exc",
    [requests.ConnectionError("down"), requests.Timeout("slow"), requests.TooManyRedirects("loop")],
)
def test_send_network_errors_return_none(sink, session, exc):
    session.post.side_effect = exc
    assert sink.send(request()) is None


def test_log_returns_future_with_ack(sink, session):
    session.post.return_value = make_response()
    future = sink.log("backend", "WARN", "service", "Shortcode not found: abc")
    assert future.result(timeout=5).log_id == "a1b2c3"
    assert session.post.call_args.kwargs["json"]["level"] == "WARN"


def test_log_failure_is_absorbed(sink, session):
    session.post.side_effect = requests.ConnectionError("down")
    assert sink.log("backend", "ERROR", "service", "boom").result(timeout=5) is None


def test_log_rejects_unknown_level(sink, session):
    with pytest.raises(ValueError, match="Unknown log level"):
        sink.log("backend", "WARNING", "service", "nope")
    session.post.assert_not_called()


def test_log_after_close_is_dropped(session):
    s = RemoteLogSink(ENDPOINT, session=session)
    s.close()
    assert s.log("backend", "INFO", "service", "late").result(timeout=5) is None
    session.post.assert_not_called()


def test_context_manager_closes_session(session):
    with RemoteLogSink(ENDPOINT, session=session) as s:
        assert isinstance(s, RemoteLogSink)
    session.close.assert_called_once()


@pytest.fixture
def stalled_session():
    """Session whose POST hangs until the test releases it."""
    started, release = threading.Event(), threading.Event()

    def post(*args, **kwargs):
        started.set()
        release.wait(timeout=10)
        return make_response()

    session = MagicMock(spec=requests.Session)
    session.post.side_effect = post
    yield session, started, release
    release.set()


def test_close_does_not_wait_for_a_stalled_collector(stalled_session):
    session, started, _ = stalled_session
    s = RemoteLogSink(ENDPOINT, timeout=0.5, session=session)
    futures = [s.log("backend", "INFO", "service", f"event {i}") for i in range(8)]
    assert started.wait(timeout=5)

    t0 = time.monotonic()
    s.close()

    assert time.monotonic() - t0 < 0.5
    assert all(f.cancelled() for f in futures[1:])
    session.close.assert_called_once()


def test_full_backlog_drops_new_events(stalled_session):
    session, _, release = stalled_session
    s = RemoteLogSink(ENDPOINT, session=session, max_pending=2)
    try:
        kept = [s.log("backend", "INFO", "service", f"kept {i}") for i in range(2)]
        dropped = [s.log("backend", "INFO", "service", f"dropped {i}") for i in range(3)]
        assert all(f.done() and f.result() is None for f in dropped)

        release.set()
        assert [f.result(timeout=5).status for f in kept] == ["success", "success"]
        # backlog drained, events flow again
        assert s.log("backend", "INFO", "service", "after").result(timeout=5).status == "success"
        assert session.post.call_count == 3
    finally:
        s.close()


def test_memory_sink_records_in_order():
    sink = MemoryLogSink()
    sink.log("backend", "INFO", "service", "one")
    sink.log("backend", "WARN", "route", "two")
    assert sink.messages() == ["one", "two"]
    assert sink.messages("WARN") == ["two"]
    assert sink.events[1].package_name == "route"


def test_memory_sink_future_is_done():
    future = MemoryLogSink().log("backend", "DEBUG", "service", "x")
    assert future.done()
    assert future.result().status == "success"


def test_null_sink_drops_events():
    assert NullLogSink().log("backend", "INFO", "service", "x").result() is None


def test_get_log_sink_disabled_returns_null():
    assert isinstance(get_log_sink(enabled=False), NullLogSink)


def test_get_log_sink_enabled_returns_remote():
    sink = get_log_sink(enabled=True, endpoint=ENDPOINT, timeout=1.0)
    try:
        assert isinstance(sink, RemoteLogSink)
        assert sink.endpoint == ENDPOINT
        assert sink.timeout == 1.0
    finally:
        sink.close()
