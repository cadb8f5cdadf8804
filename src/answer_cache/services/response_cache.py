"""Response cache service.

Exact-match store of previous question -> answer exchanges. Callers check
``lookup`` before calling the LLM, ``record`` the exchange on a miss and
``record_hit`` whenever a cached answer is served.
"""

import logging

from answer_cache.clock import Clock, utc_now
from answer_cache.config import settings
from answer_cache.entities import CacheEntry, CacheStatsSnapshot, EstimatedSavings
from answer_cache.exceptions import NotFoundError
from answer_cache.normalization import clean_text, normalize_question
from answer_cache.protocols import DocumentStorage
from answer_cache.repositories import PersistedStore
from answer_cache.repositories.documents import CacheState, decode_cache, encode_cache

logger = logging.getLogger(__name__)

POPULAR_LIMIT = 10


class ResponseCache:
    """Keyed store of answered questions with hit accounting.

    Every public operation runs its read-modify-write and the following
    save under the store lock, so concurrent calls are serialized and
    documents reach storage in operation order.

    Example:
        ```python
        cache = ResponseCache.create(JsonFileStorage("data/gpt-cache.json"))

        entry = cache.lookup(question)
        if entry is None:
            answer = call_llm(question)
            cache.record(question, answer)
        else:
            cache.record_hit(question)
            answer = entry.answer
        ```
    """

    def __init__(
        self,
        store: PersistedStore[CacheState],
        per_call_cost: float | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the response cache.

        Args:
            store: Persisted state (required).
            per_call_cost: Estimated USD cost of one LLM call. Defaults to settings.
            clock: Source of timestamps.
        """
        self._store = store
        self._per_call_cost = settings.per_call_cost if per_call_cost is None else per_call_cost
        self._clock = clock

        if self._per_call_cost < 0:
            raise ValueError("per_call_cost must not be negative")

    @classmethod
    def create(
        cls,
        storage: DocumentStorage,
        per_call_cost: float | None = None,
        clock: Clock = utc_now,
    ) -> "ResponseCache":
        """Factory method wiring a PersistedStore over ``storage``.

        Args:
            storage: Durable backend for the cache document.
            per_call_cost: Estimated USD cost of one LLM call. If None, uses settings.
            clock: Source of timestamps.

        Returns:
            Configured ResponseCache
        """
        store: PersistedStore[CacheState] = PersistedStore(
            storage=storage,
            empty=dict,
            encode=encode_cache,
            decode=decode_cache,
            name="response-cache",
        )
        return cls(store=store, per_call_cost=per_call_cost, clock=clock)

    def lookup(self, question: str) -> CacheEntry | None:
        """Find the entry whose normalized key matches ``question``.

        Returns:
            The cached entry, or None on a miss
        """
        key = normalize_question(question)
        with self._store.lock:
            entry = self._store.load().get(key)

        if entry is None:
            logger.debug("Cache miss for %r", key)
        else:
            logger.debug("Cache hit for %r (hits so far: %d)", key, entry.hits)
        return entry

    def record(self, question: str, answer: str) -> CacheEntry:
        """Store an exchange unless its key is already cached.

        Returns:
            The new entry, or the existing one unchanged
        """
        key = normalize_question(question)
        question_text = clean_text(question, "question")
        answer_text = clean_text(answer, "answer")

        with self._store.lock:
            state = self._store.load()
            existing = state.get(key)
            if existing is not None:
                return existing

            entry = CacheEntry.create(key, question_text, answer_text, now=self._clock())
            state[key] = entry
            self._store.save(state)
            total = len(state)

        logger.info("Stored new response (total: %d)", total)
        return entry

    def record_hit(self, question: str) -> CacheEntry:
        """Count one reuse of a cached answer.

        Raises:
            NotFoundError: If nothing is cached under the question's key
        """
        key = normalize_question(question)

        with self._store.lock:
            state = self._store.load()
            entry = state.get(key)
            if entry is None:
                raise NotFoundError("cache entry", key)

            updated = entry.with_hit(self._clock())
            state[key] = updated
            self._store.save(state)

        logger.info("Served cached response (hits: %d): %.60s", updated.hits, updated.question)
        return updated

    def entries(self) -> list[CacheEntry]:
        """All entries in insertion order."""
        with self._store.lock:
            return list(self._store.load().values())

    def popular(self, limit: int = POPULAR_LIMIT) -> list[CacheEntry]:
        """Most reused entries, by hits then most recent use."""
        used = [entry for entry in self.entries() if entry.hits > 0]
        used.sort(key=lambda e: (e.hits, e.last_used_at or e.created_at), reverse=True)
        return used[:limit]

    def stats(self) -> CacheStatsSnapshot:
        """Compute aggregate statistics. Never mutates state."""
        entries = self.entries()
        total_entries = len(entries)
        total_hits = sum(entry.hits for entry in entries)
        avg_hits = round(total_hits / total_entries, 2) if total_entries else 0.0

        return CacheStatsSnapshot(
            total_entries=total_entries,
            total_hits=total_hits,
            used_entries=sum(1 for entry in entries if entry.hits > 0),
            avg_hits_per_entry=avg_hits,
            estimated_savings=EstimatedSavings(
                api_calls=total_hits,
                dollars=round(total_hits * self._per_call_cost, 3),
            ),
            popular_entries=tuple(self.popular()),
        )

    def reset(self) -> int:
        """Drop every entry.

        Returns:
            Number of entries removed
        """
        with self._store.lock:
            cleared = len(self._store.load())
            self._store.save({})

        logger.info("Cache cleared (%d entries)", cleared)
        return cleared

    @property
    def per_call_cost(self) -> float:
        return self._per_call_cost

    @property
    def store(self) -> PersistedStore[CacheState]:
        """Get the underlying store (for testing)."""
        return self._store
