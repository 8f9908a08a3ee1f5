"""
Global pytest fixtures for the Shortlinks test suite.

Responsibilities:
    - Provide isolated in-memory store and log sink fixtures
    - Provide a controllable clock so expiry can be tested without sleeping
    - Provide a LinkManager wired to those fixtures, and a TestClient around it

Why an app factory?
    Using `create_app(manager)` gives each test a fresh app over fresh
    in-memory state, eliminating cross-test flakiness.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortlinks.logsink.memory import MemoryLogSink
from shortlinks.manager.link_manager import LinkManager
from shortlinks.manager.strategies import RandomStrategy
from shortlinks.storage.memory_store import MemoryStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> MemoryStore:
    """Fresh in-memory key-value store."""
    return MemoryStore()


@pytest.fixture
def log_sink() -> MemoryLogSink:
    """Log sink that records events instead of posting them."""
    return MemoryLogSink()


@pytest.fixture
def manager(store, log_sink, clock) -> LinkManager:
    """
    LinkManager wired to the in-memory fixtures.

    Uses a seeded RNG so generated codes are reproducible within a test.
    """
    return LinkManager(
        store=store,
        log_sink=log_sink,
        code_strategy=RandomStrategy(rng=random.Random(1234)),
        base_url="http://sho.rt",
        default_validity=30,
        code_length=6,
        max_attempts=16,
        allowed_schemes=(),
        storage_key="url_mappings",
        clock=clock,
    )


@pytest.fixture
def client(manager) -> TestClient:
    """Fresh TestClient over an app built around the manager fixture."""
    return TestClient(create_app(manager))
