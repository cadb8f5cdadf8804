"""
Tests for PersistedStore hydration and write-through.
"""

import json
import logging

from answer_cache.repositories import InMemoryDocumentStorage, PersistedStore, RedisDocumentStorage
from answer_cache.repositories.documents import (
    decode_cache,
    decode_learning,
    encode_cache,
    encode_learning,
)

from conftest import BrokenStorage, DownRedis, FakeRedis


def make_store(storage):
    return PersistedStore(
        storage=storage,
        empty=dict,
        encode=encode_cache,
        decode=decode_cache,
        name="test",
    )


def test_missing_document_loads_empty():
    """Test a missing document hydrates as the empty state."""
    storage = InMemoryDocumentStorage()
    store = make_store(storage)

    assert store.load() == {}
    assert storage.writes == []


def test_hydrates_only_once():
    """Test storage is read on first load only."""
    storage = InMemoryDocumentStorage("[]")
    store = make_store(storage)

    first = store.load()
    second = store.load()

    assert first is second
    assert storage.reads == 1


def test_corrupt_document_loads_empty_and_logs(caplog):
    """Test invalid JSON hydrates empty with a warning."""
    storage = InMemoryDocumentStorage("{not json")
    store = make_store(storage)

    with caplog.at_level(logging.WARNING):
        state = store.load()

    assert state == {}
    assert "Could not parse" in caplog.text


def test_wrong_shape_is_treated_as_corrupt(caplog):
    """Test a document of the wrong shape hydrates empty."""
    storage = InMemoryDocumentStorage(json.dumps({"question": "not a list"}))
    store = make_store(storage)

    with caplog.at_level(logging.WARNING):
        assert store.load() == {}
    assert "Could not parse" in caplog.text


def test_overflowing_counter_is_treated_as_corrupt(caplog):
    """Test a hit counter too large for an int hydrates empty."""
    document = (
        '[{"key": "hola", "question": "hola", "answer": "buenas",'
        ' "hits": 1e999, "createdAt": "2025-03-01T12:00:00Z"}]'
    )
    store = make_store(InMemoryDocumentStorage(document))

    with caplog.at_level(logging.WARNING):
        assert store.load() == {}
    assert "Could not parse" in caplog.text


def test_overflowing_frequency_is_treated_as_corrupt():
    """Test a pattern frequency too large for an int hydrates empty."""
    document = (
        '{"general": [{"id": "p1", "question": "hola", "frequency": 1e999,'
        ' "firstAsked": "2025-03-01T12:00:00Z"}]}'
    )
    store = PersistedStore(
        storage=InMemoryDocumentStorage(document),
        empty=dict,
        encode=encode_learning,
        decode=decode_learning,
    )

    assert store.load() == {}


def test_deeply_nested_document_is_treated_as_corrupt(caplog):
    """Test JSON nested past the recursion limit hydrates empty."""
    store = make_store(InMemoryDocumentStorage("[" * 200000))

    with caplog.at_level(logging.WARNING):
        assert store.load() == {}
    assert "Could not parse" in caplog.text


def test_save_overwrites_corrupt_document():
    """Test the next save replaces a corrupt document."""
    storage = InMemoryDocumentStorage("garbage")
    store = make_store(storage)

    store.save(store.load())

    assert json.loads(storage.content) == []


def test_unreadable_storage_loads_empty(caplog):
    """Test a storage read failure hydrates empty with a warning."""
    store = make_store(BrokenStorage(fail_read=True))

    with caplog.at_level(logging.WARNING):
        assert store.load() == {}
    assert "Storage unavailable" in caplog.text


def test_failed_write_keeps_memory_state_and_logs_error(caplog):
    """Test a failed write returns False and keeps the in-memory state."""
    store = make_store(BrokenStorage(fail_write=True))
    state = store.load()
    state["k"] = "v"

    with caplog.at_level(logging.ERROR):
        persisted = store.save(state)

    assert persisted is False
    assert store.load() == {"k": "v"}
    assert "Persistence failed" in caplog.text


def test_save_before_load_skips_stale_read():
    """Test saving marks the store hydrated."""
    storage = InMemoryDocumentStorage("[]")
    store = make_store(storage)

    store.save({})
    store.load()

    assert storage.reads == 0


def test_save_writes_whole_document_each_time():
    """Test every save writes the complete document."""
    storage = InMemoryDocumentStorage()
    store = make_store(storage)

    store.save({})
    store.save({})

    assert len(storage.writes) == 2
    assert all(json.loads(w) == [] for w in storage.writes)


def test_is_healthy_without_health_check():
    """Test backends without a health check count as healthy."""
    assert make_store(InMemoryDocumentStorage()).is_healthy() is True


def test_is_healthy_follows_redis():
    """Test is_healthy reports the Redis backend's health check."""
    assert make_store(RedisDocumentStorage(FakeRedis(), "answer_cache:cache")).is_healthy() is True
    assert make_store(RedisDocumentStorage(DownRedis(), "answer_cache:cache")).is_healthy() is False
