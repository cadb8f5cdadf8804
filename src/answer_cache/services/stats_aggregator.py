"""Read-only activity view over the response cache and the pattern learner."""

from collections.abc import Iterable
from datetime import datetime, timedelta

from answer_cache.clock import Clock, utc_now
from answer_cache.entities import ActivitySnapshot, WindowCounts
from answer_cache.exceptions import InvalidInputError

from .pattern_learner import PatternLearner
from .response_cache import ResponseCache

LAST_24H = timedelta(hours=24)
LAST_7D = timedelta(days=7)
LAST_30D = timedelta(days=30)


def window_counts(timestamps: Iterable[datetime | None], now: datetime) -> WindowCounts:
    """Count timestamps younger than 24h, 7d and 30d relative to ``now``.

    None and future timestamps are ignored.
    """
    ages = [now - ts for ts in timestamps if ts is not None and ts <= now]
    return WindowCounts(
        last_24h=sum(1 for age in ages if age < LAST_24H),
        last_7d=sum(1 for age in ages if age < LAST_7D),
        last_30d=sum(1 for age in ages if age < LAST_30D),
    )


class StatsAggregator:
    """Composes both stores' stats with externally supplied counts.

    Only reads from the stores.
    """

    def __init__(self, cache: ResponseCache, learner: PatternLearner, clock: Clock = utc_now) -> None:
        self._cache = cache
        self._learner = learner
        self._clock = clock

    def snapshot(
        self,
        active_users: int = 0,
        documents: int = 0,
        now: datetime | None = None,
    ) -> ActivitySnapshot:
        """Build the activity snapshot.

        Args:
            active_users: Count supplied by the user-profile collaborator.
            documents: Count supplied by the document collaborator.
            now: Reference time for the activity windows (timezone-aware).
                Defaults to the aggregator's clock.

        Raises:
            InvalidInputError: If a supplied count is negative
        """
        if active_users < 0 or documents < 0:
            raise InvalidInputError("active_users and documents must not be negative")

        now = now or self._clock()
        return ActivitySnapshot(
            cache=self._cache.stats(),
            learning=self._learner.stats(),
            active_users=active_users,
            documents=documents,
            cache_activity=window_counts((e.last_used_at for e in self._cache.entries()), now),
            learning_activity=window_counts((p.last_asked for p in self._learner.list_patterns()), now),
            generated_at=now,
        )

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def learner(self) -> PatternLearner:
        return self._learner
