import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import redis
from dotenv import load_dotenv

load_dotenv()

STORAGE_BACKENDS = ("file", "redis", "memory")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Storage
    data_dir: str = os.getenv("ANSWER_CACHE_DATA_DIR", "data")
    cache_file: str = os.getenv("CACHE_FILE", "gpt-cache.json")
    learning_file: str = os.getenv("LEARNING_FILE", "learned-patterns.json")
    storage_backend: str = os.getenv("STORAGE_BACKEND", "file")

    # Redis (only used when storage_backend == "redis")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_key_prefix: str = os.getenv("REDIS_KEY_PREFIX", "answer_cache")

    # Cache
    per_call_cost: float = float(os.getenv("PER_CALL_COST", "0.002"))  # USD, gpt-4o-mini estimate

    # Learning
    promotion_threshold: int = int(os.getenv("PROMOTION_THRESHOLD", "3"))
    curated_min_frequency: int = int(os.getenv("CURATED_MIN_FREQUENCY", "5"))
    max_answer_length: int = int(os.getenv("MAX_ANSWER_LENGTH", "500"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def cache_path(self) -> Path:
        """Path of the response cache document."""
        return Path(self.data_dir) / self.cache_file

    @property
    def learning_path(self) -> Path:
        """Path of the learned patterns document."""
        return Path(self.data_dir) / self.learning_file

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {list(STORAGE_BACKENDS)}, got {self.storage_backend!r}"
            )

        if self.per_call_cost < 0:
            raise ValueError("PER_CALL_COST must not be negative")

        if self.promotion_threshold < 1:
            raise ValueError("PROMOTION_THRESHOLD must be at least 1")

        if self.curated_min_frequency < 1:
            raise ValueError("CURATED_MIN_FREQUENCY must be at least 1")

        if self.max_answer_length < 1:
            raise ValueError("MAX_ANSWER_LENGTH must be at least 1")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"LOG_LEVEL is not a logging level: {self.log_level!r}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create a Redis client instance."""
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        decode_responses=False,
    )


def configure_logging(level: str | None = None) -> None:
    """Install a single stderr handler on the ``answer_cache`` logger.

    Calling it again only changes the level.
    """
    logger = logging.getLogger("answer_cache")
    logger.setLevel((level or settings.log_level).upper())
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
