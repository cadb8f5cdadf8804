"""Repository layer for data access.

This layer hides the durable backend (JSON file, Redis, memory) behind the
DocumentStorage protocol, and turns documents into store state through
``PersistedStore``.

The storages are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from answer_cache.protocols import DocumentStorage

from .json_file_storage import JsonFileStorage
from .memory_storage import InMemoryDocumentStorage
from .persisted_store import PersistedStore
from .redis_storage import RedisDocumentStorage

__all__ = [
    "DocumentStorage",
    "InMemoryDocumentStorage",
    "JsonFileStorage",
    "PersistedStore",
    "RedisDocumentStorage",
]
