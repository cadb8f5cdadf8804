"""Domain exceptions for the answer cache.

Services raise these; the HTTP handlers map them to status codes.
"""


class AnswerCacheError(Exception):
    """Base exception for all answer cache domain errors."""


class StorageUnavailableError(AnswerCacheError):
    """Durable storage could not be read or written.

    Raised by storage backends and always caught by ``PersistedStore``:
    the stores keep working in memory and the failure is only logged.
    """


class NotFoundError(AnswerCacheError):
    """An operation referenced an unknown cache key or pattern id.

    Maps to: 404 Not Found
    """

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier!r}")


class InvalidInputError(AnswerCacheError, ValueError):
    """Question, answer or field value is empty or malformed.

    Raised before any state is mutated.

    Maps to: 400 Bad Request
    """
