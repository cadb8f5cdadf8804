"""Document storage protocol.

Defines the interface for any durable backend that holds one whole
serialized document (the full state of one store).

Implementations:
- JSON file on local disk (default)
- Redis string key
- In-memory (tests, ephemeral deployments)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class DocumentStorage(Protocol):
    """Protocol for single-document storage backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        from answer_cache.protocols import DocumentStorage

        storage: DocumentStorage = JsonFileStorage("data/gpt-cache.json")
        storage: DocumentStorage = RedisDocumentStorage(client, "answer_cache:cache")
        ```
    """

    def read(self) -> str | None:
        """Read the whole document.

        Returns:
            The stored text, or None if no document exists yet

        Raises:
            StorageUnavailableError: If the backend cannot be read
        """
        ...

    def write(self, content: str) -> None:
        """Replace the whole document.

        Args:
            content: The full serialized state

        Raises:
            StorageUnavailableError: If the backend cannot be written
        """
        ...

    def describe(self) -> str:
        """Return a human-readable location for logs and health output."""
        ...
