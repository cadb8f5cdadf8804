"""
Tests for ResponseCache.
"""

import json
import logging
import threading

import pytest

from answer_cache.exceptions import InvalidInputError, NotFoundError
from answer_cache.repositories import InMemoryDocumentStorage
from answer_cache.services import ResponseCache

from conftest import START, BrokenStorage

QUESTION = "¿Cuál es el horario de la biblioteca?"
ANSWER = "La biblioteca abre de 7am a 9pm."


def test_record_then_lookup(cache, clock):
    """Test a recorded exchange is found with no hits."""
    entry = cache.record(QUESTION, ANSWER)

    found = cache.lookup(QUESTION)

    assert found == entry
    assert found.answer == ANSWER
    assert found.hits == 0
    assert found.created_at == START
    assert found.last_used_at is None


def test_lookup_is_normalized(cache):
    """Test lookup ignores case and spacing."""
    cache.record(QUESTION, ANSWER)

    found = cache.lookup("  ¿cuál ES el   horario de la BIBLIOTECA?")

    assert found is not None
    assert found.question == QUESTION


def test_padded_question_hits_cached_answer(cache):
    """Test a padded, lower-cased question hits the cached answer."""
    cache.record("¿Cuál es el horario de la biblioteca?", "8am-8pm")

    entry = cache.lookup("  ¿cuál es el horario de la biblioteca?  ")

    assert entry is not None
    assert entry.answer == "8am-8pm"


def test_lookup_miss_returns_none(cache):
    """Test an unknown question misses."""
    assert cache.lookup("¿Dónde queda el bloque 14?") is None


def test_lookup_does_not_write(cache, cache_storage):
    """Test lookup and stats never persist."""
    cache.lookup(QUESTION)
    cache.record(QUESTION, ANSWER)
    writes = len(cache_storage.writes)

    cache.lookup(QUESTION)
    cache.stats()

    assert len(cache_storage.writes) == writes


def test_record_existing_key_is_a_noop(cache, cache_storage):
    """Test recording a cached question keeps the first answer."""
    first = cache.record(QUESTION, ANSWER)

    second = cache.record(QUESTION.upper(), "Otra respuesta")

    assert second == first
    assert cache.lookup(QUESTION).answer == ANSWER
    assert len(cache_storage.writes) == 1


def test_record_hit_counts_and_stamps(cache, clock):
    """Test N hits give hits == N and the last hit's timestamp."""
    cache.record(QUESTION, ANSWER)
    used_at = clock.advance(minutes=5)

    for _ in range(4):
        entry = cache.record_hit(QUESTION)

    assert entry.hits == 4
    assert entry.last_used_at == used_at
    assert cache.lookup(QUESTION).hits == 4


def test_record_hit_unknown_question(cache):
    """Test a hit on an uncached question raises NotFoundError."""
    with pytest.raises(NotFoundError) as exc_info:
        cache.record_hit("¿Quién es el rector?")
    assert exc_info.value.kind == "cache entry"


@pytest.mark.parametrize("question", ["", "   ", None])
def test_invalid_question_rejected(cache, question):
    """Test blank or missing questions are rejected."""
    with pytest.raises(InvalidInputError):
        cache.lookup(question)
    with pytest.raises(InvalidInputError):
        cache.record(question, ANSWER)


def test_blank_answer_rejected(cache):
    """Test a blank answer is rejected before any mutation."""
    with pytest.raises(InvalidInputError):
        cache.record(QUESTION, "  ")
    assert cache.entries() == []


def test_empty_stats():
    """Test stats on an empty cache are all zero."""
    cache = ResponseCache.create(InMemoryDocumentStorage())

    stats = cache.stats()

    assert stats.total_entries == 0
    assert stats.total_hits == 0
    assert stats.used_entries == 0
    assert stats.avg_hits_per_entry == 0
    assert stats.estimated_savings.api_calls == 0
    assert stats.estimated_savings.dollars == 0
    assert stats.popular_entries == ()


def test_stats_after_hits(cache):
    """Test totals, average and savings after some hits."""
    cache.record("uno", "1")
    cache.record("dos", "2")
    cache.record("tres", "3")
    for _ in range(3):
        cache.record_hit("uno")
    cache.record_hit("dos")

    stats = cache.stats()

    assert stats.total_entries == 3
    assert stats.total_hits == 4
    assert stats.used_entries == 2
    assert stats.avg_hits_per_entry == 1.33
    assert stats.estimated_savings.api_calls == 4
    assert stats.estimated_savings.dollars == 0.008
    assert [e.question for e in stats.popular_entries] == ["uno", "dos"]


def test_popular_is_capped(cache):
    """Test popular entries are limited to ten."""
    for i in range(12):
        cache.record(f"pregunta {i}", "respuesta")
        cache.record_hit(f"pregunta {i}")

    assert len(cache.stats().popular_entries) == 10


def test_reset_clears_everything(cache, cache_storage):
    """Test reset empties the cache and its stored document."""
    for i in range(5):
        cache.record(f"pregunta {i}", "respuesta")
        for _ in range(4):
            cache.record_hit(f"pregunta {i}")
    assert cache.stats().total_hits == 20

    cleared = cache.reset()

    assert cleared == 5
    assert cache.stats().total_entries == 0
    assert cache.stats().total_hits == 0
    assert json.loads(cache_storage.content) == []


def test_lookup_after_reset_misses(cache):
    """Test previously cached questions miss after reset."""
    cache.record(QUESTION, ANSWER)
    cache.reset()

    assert cache.lookup(QUESTION) is None
    with pytest.raises(NotFoundError):
        cache.record_hit(QUESTION)


def test_state_survives_restart(cache_storage, clock):
    """Test a new cache over the same storage sees earlier writes."""
    ResponseCache.create(cache_storage, clock=clock).record(QUESTION, ANSWER)
    ResponseCache.create(cache_storage, clock=clock).record_hit(QUESTION)

    reopened = ResponseCache.create(cache_storage, clock=clock)

    entry = reopened.lookup(QUESTION)
    assert entry.answer == ANSWER
    assert entry.hits == 1
    assert entry.last_used_at == START


def test_corrupt_document_starts_empty(clock, caplog):
    """Test a corrupt document starts empty and is rewritten cleanly."""
    storage = InMemoryDocumentStorage("[{broken")

    with caplog.at_level(logging.WARNING):
        cache = ResponseCache.create(storage, clock=clock)
        assert cache.lookup(QUESTION) is None

    cache.record(QUESTION, ANSWER)
    assert json.loads(storage.content)[0]["question"] == QUESTION


def test_stored_null_answer_is_never_served(clock):
    """Test a document entry with a null answer is not served as text."""
    document = '[{"key": "hola que tal", "question": "hola que tal", "answer": null, "hits": 0, "createdAt": "2025-03-01T12:00:00Z"}]'
    cache = ResponseCache.create(InMemoryDocumentStorage(document), clock=clock)

    assert cache.lookup("hola que tal") is None


def test_overflowing_document_does_not_crash(clock):
    """Test a document with an out-of-range hit count starts empty."""
    document = '[{"key": "a", "question": "a", "answer": "b", "hits": 1e999, "createdAt": "2025-03-01T12:00:00Z"}]'
    cache = ResponseCache.create(InMemoryDocumentStorage(document), clock=clock)

    assert cache.lookup("a") is None
    assert cache.record("a", "b").hits == 0


def test_storage_failure_does_not_reach_caller(clock, caplog):
    """Test failed writes are logged while operations keep working."""
    cache = ResponseCache.create(BrokenStorage(fail_write=True), clock=clock)

    with caplog.at_level(logging.ERROR):
        cache.record(QUESTION, ANSWER)
        entry = cache.record_hit(QUESTION)

    assert entry.hits == 1
    assert cache.lookup(QUESTION).hits == 1
    assert "Persistence failed" in caplog.text


def test_concurrent_hits_are_not_lost(cache, cache_storage):
    """Test hits from several threads are all counted and persisted."""
    cache.record(QUESTION, ANSWER)

    def hit():
        for _ in range(50):
            cache.record_hit(QUESTION)

    threads = [threading.Thread(target=hit) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cache.lookup(QUESTION).hits == 200
    assert json.loads(cache_storage.content)[0]["hits"] == 200


def test_negative_cost_rejected(cache_storage):
    """Test a negative per-call cost is rejected."""
    with pytest.raises(ValueError):
        ResponseCache.create(cache_storage, per_call_cost=-0.01)
