"""Redis implementation of DocumentStorage.

Keeps the whole document of one store under a single Redis string key.
Useful when the process runs on ephemeral disk but a Redis is at hand.
"""

import redis

from answer_cache.config import Settings, get_redis_client, settings
from answer_cache.exceptions import StorageUnavailableError


class RedisDocumentStorage:
    """Redis string-key document storage.

    This class satisfies the DocumentStorage protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, redis_client: redis.Redis, key: str) -> None:
        """Initialize the Redis document storage.

        Args:
            redis_client: Redis client instance.
            key: The key holding the document.
        """
        self._client = redis_client
        self._key = key

    @classmethod
    def create(cls, name: str, config: Settings | None = None) -> "RedisDocumentStorage":
        """Factory method to create RedisDocumentStorage with defaults.

        Args:
            name: Store name, appended to the configured key prefix.
            config: Settings to read the URL and prefix from. If None, uses settings.

        Returns:
            Configured RedisDocumentStorage
        """
        config = config or settings
        return cls(
            redis_client=get_redis_client(config),
            key=f"{config.redis_key_prefix}:{name}",
        )

    def read(self) -> str | None:
        try:
            raw = self._client.get(self._key)
        except redis.RedisError as e:
            raise StorageUnavailableError(f"cannot read redis key {self._key}: {e}") from e

        if raw is None:
            return None
        if isinstance(raw, bytes):
            try:
                return raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise StorageUnavailableError(f"redis key {self._key} is not UTF-8: {e}") from e
        return str(raw)

    def write(self, content: str) -> None:
        try:
            self._client.set(self._key, content.encode("utf-8"))
        except redis.RedisError as e:
            raise StorageUnavailableError(f"cannot write redis key {self._key}: {e}") from e

    def describe(self) -> str:
        return f"redis:{self._key}"

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
