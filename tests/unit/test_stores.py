"""
Unit tests for the key-value stores.

Every backend must satisfy the same contract:
    - missing key reads as None
    - write fully replaces the value
    - keys are independent
Backend-specific failure modes are covered below the contract tests.
"""

import os

import pytest

from shortlinks.errors import StorageError
from shortlinks.storage.db_store import SQLiteStore
from shortlinks.storage.file_store import FileStore
from shortlinks.storage.memory_store import MemoryStore


@pytest.fixture(params=["memory", "file", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    if request.param == "file":
        return FileStore(str(tmp_path / "store.json"))
    return SQLiteStore(str(tmp_path / "store.db"))


def test_missing_key_reads_none(any_store):
    assert any_store.read("url_mappings") is None


def test_write_then_read(any_store):
    any_store.write("url_mappings", "[]")
    assert any_store.read("url_mappings") == "[]"


def test_write_replaces_value(any_store):
    any_store.write("url_mappings", "[1]")
    any_store.write("url_mappings", "[2]")
    assert any_store.read("url_mappings") == "[2]"


def test_keys_are_independent(any_store):
    any_store.write("a", "1")
    any_store.write("b", "2")
    assert any_store.read("a") == "1"
    assert any_store.read("b") == "2"


# -------------------------
# FileStore
# -------------------------

def test_file_store_survives_new_instance(tmp_path):
    path = str(tmp_path / "nested" / "store.json")
    FileStore(path).write("k", "v")
    assert FileStore(path).read("k") == "v"


def test_file_store_leaves_no_temp_files(tmp_path):
    store = FileStore(str(tmp_path / "store.json"))
    store.write("k", "v")
    assert os.listdir(tmp_path) == ["store.json"]


def test_file_store_corrupt_document_raises_storage_error(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{oops", encoding="utf-8")
    with pytest.raises(StorageError):
        FileStore(str(path)).read("k")


def test_file_store_non_object_document_raises_storage_error(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(StorageError):
        FileStore(str(path)).read("k")


def test_file_store_unwritable_location_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(StorageError):
        FileStore(str(blocker / "store.json")).write("k", "v")


# -------------------------
# SQLiteStore
# -------------------------

def test_sqlite_store_survives_new_instance(tmp_path):
    path = str(tmp_path / "store.db")
    SQLiteStore(path).write("k", "v")
    assert SQLiteStore(path).read("k") == "v"


def test_sqlite_store_unopenable_path_raises_storage_error(tmp_path):
    store = SQLiteStore(str(tmp_path / "missing-dir" / "store.db"))
    with pytest.raises(StorageError):
        store.read("k")
