"""Durable mapping with lazy hydration and write-through persistence.

Both services keep their whole state in one in-memory structure and hand
it back here after every mutation. The in-memory copy is the source of
truth once loaded; storage failures never reach the caller.
"""

import json
import logging
import threading
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from answer_cache.exceptions import StorageUnavailableError
from answer_cache.protocols import DocumentStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Raised by json.loads or a decoder on a document it cannot use
_UNPARSABLE = (ValueError, TypeError, KeyError, AttributeError, OverflowError, RecursionError)


class PersistedStore(Generic[T]):
    """State of one store, backed by a single document.

    Example:
        ```python
        store = PersistedStore(
            storage=JsonFileStorage("data/gpt-cache.json"),
            empty=dict,
            encode=encode_cache,
            decode=decode_cache,
            name="response-cache",
        )
        state = store.load()
        state[key] = entry
        store.save(state)
        ```
    """

    def __init__(
        self,
        storage: DocumentStorage,
        empty: Callable[[], T],
        encode: Callable[[T], Any],
        decode: Callable[[Any], T],
        name: str = "store",
    ) -> None:
        """Initialize the store.

        Args:
            storage: Durable backend holding the document.
            empty: Factory for the empty state (missing or unusable document).
            encode: Converts the state to a JSON-serializable value.
            decode: Converts a parsed JSON value back to state. Raises
                ValueError, TypeError, KeyError, AttributeError or OverflowError
                on bad shape.
            name: Label used in log messages.
        """
        self._storage = storage
        self._empty = empty
        self._encode = encode
        self._decode = decode
        self._name = name
        self._lock = threading.RLock()
        self._state: T | None = None
        self._loaded = False

    def load(self) -> T:
        """Return the in-memory state, hydrating from storage on first use."""
        with self._lock:
            if not self._loaded:
                self._state = self._hydrate()
                self._loaded = True
            return self._state  # type: ignore[return-value]

    def save(self, state: T) -> bool:
        """Replace the durable document with ``state``.

        The in-memory state is updated even when the write fails.

        Returns:
            True if the document was written, False if persistence failed
        """
        with self._lock:
            self._state = state
            self._loaded = True
            content = json.dumps(self._encode(state), ensure_ascii=False, indent=2)
            try:
                self._storage.write(content)
            except StorageUnavailableError as e:
                logger.error(
                    "[%s] Persistence failed, continuing with in-memory state only: %s",
                    self._name,
                    e,
                )
                return False
            return True

    def _hydrate(self) -> T:
        try:
            raw = self._storage.read()
        except StorageUnavailableError as e:
            logger.warning("[%s] Storage unavailable, starting empty: %s", self._name, e)
            return self._empty()

        if raw is None:
            logger.debug("[%s] No document at %s, starting empty", self._name, self._storage.describe())
            return self._empty()

        try:
            state = self._decode(json.loads(raw))
        except _UNPARSABLE as e:
            logger.warning(
                "[%s] Could not parse %s, starting empty: %s",
                self._name,
                self._storage.describe(),
                e,
            )
            return self._empty()

        logger.info("[%s] Loaded %d items from %s", self._name, _size(state), self._storage.describe())
        return state

    def is_healthy(self) -> bool:
        """Check the backend when it supports a health check.

        Returns:
            False if the backend reports it cannot be reached, True otherwise
        """
        health_check = getattr(self._storage, "health_check", None)
        if health_check is None:
            return True
        return bool(health_check())

    @property
    def lock(self) -> threading.RLock:
        """Lock serializing read-modify-write sequences on this store."""
        return self._lock

    @property
    def storage(self) -> DocumentStorage:
        """Get the underlying storage backend."""
        return self._storage

    @property
    def name(self) -> str:
        return self._name


def _size(state: Any) -> int:
    try:
        return len(state)
    except TypeError:
        return 1
