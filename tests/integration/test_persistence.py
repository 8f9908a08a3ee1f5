"""
Integration tests: LinkManager over the persistent stores.

The collection is the only source of truth, so a second manager opened on
the same file or database must see exactly what the first one wrote.
"""

import pytest

from shortlinks.logsink.memory import MemoryLogSink
from shortlinks.manager.link_manager import LinkManager
from shortlinks.storage.storage_factory import get_store


@pytest.fixture(params=["file", "sqlite"])
def store_factory(request, tmp_path):
    path = str(tmp_path / f"links.{request.param}")
    return lambda: get_store(request.param, path=path)


def open_manager(store_factory, clock):
    return LinkManager(store=store_factory(), log_sink=MemoryLogSink(), base_url="http://sho.rt", clock=clock)


def test_mappings_survive_a_new_manager(store_factory, clock):
    first = open_manager(store_factory, clock)
    code = first.create("https://example.com", validity_minutes=30).shortcode
    assert first.resolve(code) == "https://example.com"

    second = open_manager(store_factory, clock)
    [mapping] = second.list()
    assert mapping.shortcode == code
    assert mapping.access_count == 1
    assert second.resolve(code) == "https://example.com"
    assert first.get(code).access_count == 2


def test_expiry_and_delete_are_persisted(store_factory, clock):
    mgr = open_manager(store_factory, clock)
    short = mgr.create("https://short.example", validity_minutes=1).shortcode
    keep = mgr.create("https://keep.example", validity_minutes=60).shortcode
    gone = mgr.create("https://gone.example", validity_minutes=60).shortcode

    clock.advance(minutes=2)
    assert mgr.resolve(short) is None
    assert mgr.delete(gone) is True

    reopened = open_manager(store_factory, clock)
    assert [m.shortcode for m in reopened.list()] == [keep]


def test_custom_code_conflict_across_managers(store_factory, clock):
    from shortlinks.errors import CodeTakenError

    open_manager(store_factory, clock).create("https://one.com", custom_code="shared")
    with pytest.raises(CodeTakenError):
        open_manager(store_factory, clock).create("https://two.com", custom_code="shared")
