"""Pattern learner service.

Counts how often each question is asked, per category, so frequent ones
can be promoted into the curated answer set. Promotion is an explicit
call; the eligibility rule lives in ``PromotionPolicy``.
"""

import logging

from answer_cache.clock import Clock, utc_now
from answer_cache.config import settings
from answer_cache.entities import (
    DEFAULT_CATEGORY,
    CategorySummary,
    LearnedPattern,
    LearningStatsSnapshot,
)
from answer_cache.exceptions import InvalidInputError, NotFoundError
from answer_cache.normalization import clean_text, normalize_question
from answer_cache.protocols import DocumentStorage
from answer_cache.repositories import PersistedStore
from answer_cache.repositories.documents import LearningState, decode_learning, encode_learning

logger = logging.getLogger(__name__)

TOP_QUESTIONS_PER_CATEGORY = 3


def clean_category(category: str | None) -> str:
    """Trim a category label; None or blank means the default category."""
    if category is None:
        return DEFAULT_CATEGORY
    if not isinstance(category, str):
        raise InvalidInputError(f"category must be a string, got {type(category).__name__}")
    return category.strip() or DEFAULT_CATEGORY


def pattern_order(pattern: LearnedPattern) -> tuple:
    """Sort key: most frequent first, then oldest first, then id."""
    return (-pattern.frequency, pattern.first_asked, pattern.id)


class PatternLearner:
    """Keyed store of observed questions grouped by category.

    Example:
        ```python
        learner = PatternLearner.create(JsonFileStorage("data/learned-patterns.json"))
        pattern = learner.observe("¿Dónde queda el bloque 14?", category="ubicacion")

        policy = PromotionPolicy(threshold=3)
        if policy.is_eligible(pattern):
            learner.promote(pattern.id, "Junto a la biblioteca central.")
        ```
    """

    def __init__(
        self,
        store: PersistedStore[LearningState],
        threshold: int | None = None,
        max_answer_length: int | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the pattern learner.

        Args:
            store: Persisted state (required).
            threshold: Frequency counted as "frequent" in stats. Defaults to settings.
            max_answer_length: Curated answers are truncated to this length. Defaults to settings.
            clock: Source of timestamps.
        """
        self._store = store
        self._threshold = settings.promotion_threshold if threshold is None else threshold
        self._max_answer_length = (
            settings.max_answer_length if max_answer_length is None else max_answer_length
        )
        self._clock = clock

        if self._threshold < 1:
            raise ValueError("threshold must be at least 1")
        if self._max_answer_length < 1:
            raise ValueError("max_answer_length must be at least 1")

    @classmethod
    def create(
        cls,
        storage: DocumentStorage,
        threshold: int | None = None,
        max_answer_length: int | None = None,
        clock: Clock = utc_now,
    ) -> "PatternLearner":
        """Factory method wiring a PersistedStore over ``storage``.

        Args:
            storage: Durable backend for the learning document.
            threshold: Stats frequency threshold. If None, uses settings.
            max_answer_length: Curated answer length cap. If None, uses settings.
            clock: Source of timestamps.

        Returns:
            Configured PatternLearner
        """
        store: PersistedStore[LearningState] = PersistedStore(
            storage=storage,
            empty=dict,
            encode=encode_learning,
            decode=decode_learning,
            name="pattern-learner",
        )
        return cls(store=store, threshold=threshold, max_answer_length=max_answer_length, clock=clock)

    def observe(self, question: str, category: str | None = DEFAULT_CATEGORY) -> LearnedPattern:
        """Count one occurrence of ``question`` under ``category``.

        Increments the matching pattern (same category, same normalized
        question) or creates a new one with frequency 1. Promotion state and
        answer of an existing pattern are kept.
        """
        key = normalize_question(question)
        question_text = clean_text(question, "question")
        category = clean_category(category)

        with self._store.lock:
            state = self._store.load()
            existing = self._find(state, key, category)
            if existing is None:
                pattern = LearnedPattern.create(question_text, category, now=self._clock())
                logger.debug("New pattern in %s: %.60s", category, question_text)
            else:
                pattern = existing.observed(self._clock())
                if pattern.frequency == self._threshold and not pattern.added_to_training:
                    logger.info(
                        "Frequent pattern detected (%dx) in %s: %.60s",
                        pattern.frequency,
                        category,
                        pattern.question,
                    )
            state[pattern.id] = pattern
            self._store.save(state)

        return pattern

    def promote(self, pattern_id: str, answer: str) -> LearnedPattern:
        """Mark a pattern as part of the curated answer set.

        Promoting an already promoted pattern replaces its answer.

        Raises:
            NotFoundError: If ``pattern_id`` is unknown
            InvalidInputError: If ``answer`` is blank
        """
        answer_text = self._clean_answer(answer)

        with self._store.lock:
            state = self._store.load()
            pattern = self._get(state, pattern_id)
            promoted = pattern.promoted(answer_text)
            state[pattern_id] = promoted
            self._store.save(state)

        logger.info("Promoted pattern %s (%dx): %.60s", pattern_id, promoted.frequency, promoted.question)
        return promoted

    def update(
        self,
        pattern_id: str,
        *,
        question: str | None = None,
        category: str | None = None,
        frequency: int | None = None,
        answer: str | None = None,
    ) -> LearnedPattern:
        """Revise a pattern from the admin surface.

        ``id`` and the promotion flag are never touched. An explicit
        ``frequency`` resets the counter.

        Raises:
            NotFoundError: If ``pattern_id`` is unknown
            InvalidInputError: If a given field is blank, frequency < 1, or the
                revised question already exists in the target category
        """
        question_text = clean_text(question, "question") if question is not None else None
        category_text = clean_category(category) if category is not None else None
        answer_text = self._clean_answer(answer) if answer is not None else None
        if frequency is not None and (
            isinstance(frequency, bool) or not isinstance(frequency, int) or frequency < 1
        ):
            raise InvalidInputError(f"frequency must be a positive integer, got {frequency!r}")

        with self._store.lock:
            state = self._store.load()
            pattern = self._get(state, pattern_id)
            updated = pattern.revised(
                self._clock(),
                question=question_text,
                category=category_text,
                frequency=frequency,
                answer=answer_text,
            )
            others = {pid: p for pid, p in state.items() if pid != pattern_id}
            duplicate = self._find(others, normalize_question(updated.question), updated.category)
            if duplicate is not None:
                raise InvalidInputError(
                    f"pattern {duplicate.id!r} already holds this question in {updated.category!r}"
                )
            state[pattern_id] = updated
            self._store.save(state)

        logger.info("Updated pattern %s", pattern_id)
        return updated

    def get(self, pattern_id: str) -> LearnedPattern:
        """Fetch one pattern.

        Raises:
            NotFoundError: If ``pattern_id`` is unknown
        """
        with self._store.lock:
            return self._get(self._store.load(), pattern_id)

    def list_patterns(self, category: str | None = None) -> list[LearnedPattern]:
        """Patterns, optionally of one category, most frequent first.

        Ties break on ``first_asked`` (oldest first), then ``id``.
        """
        with self._store.lock:
            patterns = [
                pattern
                for pattern in self._store.load().values()
                if category is None or pattern.category == category
            ]
        return sorted(patterns, key=pattern_order)

    def remove(self, pattern_id: str) -> bool:
        """Delete a pattern.

        Returns:
            True if a pattern was deleted, False if the id was unknown
        """
        with self._store.lock:
            state = self._store.load()
            removed = state.pop(pattern_id, None)
            if removed is None:
                return False
            self._store.save(state)

        logger.info("Removed pattern %s from %s", pattern_id, removed.category)
        return True

    def find_answer(self, question: str, min_frequency: int | None = None) -> LearnedPattern | None:
        """Look up a curated answer for ``question`` across all categories.

        Only patterns that have an answer and were asked at least
        ``min_frequency`` times qualify; the most frequent one wins.
        """
        key = normalize_question(question)
        if min_frequency is None:
            min_frequency = settings.curated_min_frequency

        for pattern in self.list_patterns():
            if (
                pattern.answer
                and pattern.frequency >= min_frequency
                and normalize_question(pattern.question) == key
            ):
                logger.debug("Curated answer found (%dx) for %r", pattern.frequency, key)
                return pattern
        return None

    def stats(self) -> LearningStatsSnapshot:
        """Compute aggregate statistics. Never mutates state."""
        patterns = self.list_patterns()
        groups: dict[str, list[LearnedPattern]] = {}
        for pattern in patterns:
            groups.setdefault(pattern.category, []).append(pattern)

        categories = {}
        for category in sorted(groups):
            items = groups[category]
            categories[category] = CategorySummary(
                total=len(items),
                frequent=sum(1 for p in items if p.frequency >= self._threshold),
                in_training=sum(1 for p in items if p.added_to_training),
                top_questions=tuple(items[:TOP_QUESTIONS_PER_CATEGORY]),
            )

        total = len(patterns)
        in_training = sum(1 for p in patterns if p.added_to_training)
        return LearningStatsSnapshot(
            total_patterns=total,
            by_category={category: summary.total for category, summary in categories.items()},
            total_frequent=sum(summary.frequent for summary in categories.values()),
            total_in_training=in_training,
            threshold=self._threshold,
            learning_rate=round(in_training / total * 100) if total else 0,
            pending_promotion=sum(
                1 for p in patterns if p.frequency >= self._threshold and not p.added_to_training
            ),
            categories=categories,
        )

    def reset(self) -> int:
        """Drop every pattern.

        Returns:
            Number of patterns removed
        """
        with self._store.lock:
            cleared = len(self._store.load())
            self._store.save({})

        logger.info("Learned patterns cleared (%d patterns)", cleared)
        return cleared

    def _clean_answer(self, answer: str) -> str:
        return clean_text(answer, "answer")[: self._max_answer_length]

    @staticmethod
    def _find(state: LearningState, key: str, category: str) -> LearnedPattern | None:
        for pattern in state.values():
            if pattern.category == category and normalize_question(pattern.question) == key:
                return pattern
        return None

    @staticmethod
    def _get(state: LearningState, pattern_id: str) -> LearnedPattern:
        pattern = state.get(pattern_id)
        if pattern is None:
            raise NotFoundError("pattern", pattern_id)
        return pattern

    @property
    def threshold(self) -> int:
        """Frequency counted as "frequent"."""
        return self._threshold

    @property
    def store(self) -> PersistedStore[LearningState]:
        """Get the underlying store (for testing)."""
        return self._store
