"""JSON file implementation of DocumentStorage.

The default backend. Each store owns one file; writes replace it whole.
"""

import logging
import os
import tempfile
from pathlib import Path

from answer_cache.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Single-file document storage.

    Satisfies the DocumentStorage protocol through structural typing.
    A write goes to a temporary sibling file that is then moved over the
    target with ``os.replace``, so readers never see a half-written document.
    """

    def __init__(self, path: str | os.PathLike[str], encoding: str = "utf-8") -> None:
        """Initialize the file storage.

        Args:
            path: Location of the document. Parent directories are created on write.
            encoding: Text encoding of the file.
        """
        self._path = Path(path)
        self._encoding = encoding

    @classmethod
    def create(cls, path: str | os.PathLike[str]) -> "JsonFileStorage":
        """Factory method to create JsonFileStorage with defaults."""
        return cls(path=path)

    def read(self) -> str | None:
        try:
            return self._path.read_text(encoding=self._encoding)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageUnavailableError(f"cannot read {self._path}: {e}") from e

    def write(self, content: str) -> None:
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            with os.fdopen(fd, "w", encoding=self._encoding) as f:
                f.write(content)
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageUnavailableError(f"cannot write {self._path}: {e}") from e
        logger.debug("Wrote %d bytes to %s", len(content), self._path)

    def describe(self) -> str:
        return f"file:{self._path}"

    @property
    def path(self) -> Path:
        """Get the document path."""
        return self._path
