"""
Shared fixtures for the answer cache tests.
"""

from datetime import datetime, timedelta, timezone

import pytest
import redis

from answer_cache.exceptions import StorageUnavailableError
from answer_cache.repositories import InMemoryDocumentStorage
from answer_cache.services import PatternLearner, ResponseCache, StatsAggregator

START = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock returning a settable time."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class BrokenStorage(InMemoryDocumentStorage):
    """Storage whose reads and/or writes fail."""

    def __init__(self, content=None, fail_read=False, fail_write=True) -> None:
        super().__init__(content)
        self.fail_read = fail_read
        self.fail_write = fail_write

    def read(self):
        if self.fail_read:
            raise StorageUnavailableError("disk gone")
        return super().read()

    def write(self, content):
        if self.fail_write:
            raise StorageUnavailableError("disk full")
        super().write(content)


class FakeRedis:
    """Just enough of redis.Redis for RedisDocumentStorage."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value
        return True

    def ping(self):
        return True


class DownRedis:
    """Redis client whose server is unreachable."""

    def get(self, key):
        raise redis.ConnectionError("connection refused")

    def set(self, key, value):
        raise redis.ConnectionError("connection refused")

    def ping(self):
        raise redis.ConnectionError("connection refused")


@pytest.fixture
def clock():
    """Clock frozen at START until advanced."""
    return FakeClock()


@pytest.fixture
def cache_storage():
    """In-memory storage for the cache document."""
    return InMemoryDocumentStorage()


@pytest.fixture
def learning_storage():
    """In-memory storage for the learning document."""
    return InMemoryDocumentStorage()


@pytest.fixture
def cache(cache_storage, clock):
    """Response cache over in-memory storage."""
    return ResponseCache.create(cache_storage, per_call_cost=0.002, clock=clock)


@pytest.fixture
def learner(learning_storage, clock):
    """Pattern learner with threshold 3 over in-memory storage."""
    return PatternLearner.create(learning_storage, threshold=3, max_answer_length=500, clock=clock)


@pytest.fixture
def aggregator(cache, learner, clock):
    """Stats aggregator over the cache and learner fixtures."""
    return StatsAggregator(cache, learner, clock=clock)
