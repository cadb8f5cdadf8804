"""HTTP handler for the dashboard activity snapshot."""

from answer_cache.dto import ActivityResponse
from answer_cache.services import StatsAggregator

from .errors import to_http_error


class StatsHandler:
    def __init__(self, aggregator: StatsAggregator) -> None:
        self._aggregator = aggregator

    async def activity(self, active_users: int = 0, documents: int = 0) -> ActivityResponse:
        """Handle GET /stats/activity requests."""
        try:
            snapshot = self._aggregator.snapshot(active_users=active_users, documents=documents)
        except Exception as e:
            raise to_http_error(e, "build activity snapshot") from e
        return ActivityResponse.model_validate(snapshot)
