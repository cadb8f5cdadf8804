"""
Tests for the DocumentStorage backends.
"""

import pytest

from answer_cache.exceptions import StorageUnavailableError
from answer_cache.protocols import DocumentStorage
from answer_cache.repositories import (
    InMemoryDocumentStorage,
    JsonFileStorage,
    RedisDocumentStorage,
)

from conftest import DownRedis, FakeRedis


def test_backends_satisfy_protocol(tmp_path):
    """Test every backend satisfies DocumentStorage."""
    assert isinstance(InMemoryDocumentStorage(), DocumentStorage)
    assert isinstance(JsonFileStorage(tmp_path / "doc.json"), DocumentStorage)
    assert isinstance(RedisDocumentStorage(FakeRedis(), "k"), DocumentStorage)


class TestJsonFileStorage:
    def test_missing_file_reads_none(self, tmp_path):
        """Test a missing file reads as no document."""
        assert JsonFileStorage.create(tmp_path / "absent.json").read() is None

    def test_write_creates_parent_directories(self, tmp_path):
        """Test writing creates the data directory."""
        storage = JsonFileStorage.create(tmp_path / "nested" / "dir" / "doc.json")

        storage.write('{"a": 1}')

        assert storage.path.read_text(encoding="utf-8") == '{"a": 1}'

    def test_write_replaces_whole_document(self, tmp_path):
        """Test a shorter write leaves nothing of the previous document."""
        storage = JsonFileStorage.create(tmp_path / "doc.json")

        storage.write("[1, 2, 3, 4, 5, 6]")
        storage.write("[]")

        assert storage.read() == "[]"

    def test_write_leaves_no_temporary_files(self, tmp_path):
        """Test the temporary sibling file is moved into place."""
        storage = JsonFileStorage.create(tmp_path / "doc.json")

        storage.write("[]")
        storage.write("[1]")

        assert [p.name for p in tmp_path.iterdir()] == ["doc.json"]

    def test_non_ascii_round_trips(self, tmp_path):
        """Test accented text is stored as UTF-8."""
        storage = JsonFileStorage.create(tmp_path / "doc.json")

        storage.write('["¿Dónde queda el bloque 14?"]')

        assert storage.read() == '["¿Dónde queda el bloque 14?"]'

    def test_unreadable_path_raises_storage_unavailable(self, tmp_path):
        """Test reading a directory raises StorageUnavailableError."""
        storage = JsonFileStorage.create(tmp_path)

        with pytest.raises(StorageUnavailableError):
            storage.read()

    def test_unwritable_path_raises_storage_unavailable(self, tmp_path):
        """Test a failed replace raises and cleans up the temporary file."""
        target = tmp_path / "doc.json"
        target.mkdir()
        storage = JsonFileStorage.create(target)

        with pytest.raises(StorageUnavailableError):
            storage.write("[]")
        assert [p.name for p in tmp_path.iterdir()] == ["doc.json"]

    def test_describe(self, tmp_path):
        """Test describe names the file."""
        assert JsonFileStorage(tmp_path / "doc.json").describe() == f"file:{tmp_path / 'doc.json'}"


class TestRedisDocumentStorage:
    def test_missing_key_reads_none(self):
        """Test a missing key reads as no document."""
        assert RedisDocumentStorage(FakeRedis(), "answer_cache:cache").read() is None

    def test_write_then_read(self):
        """Test the document is stored as UTF-8 bytes under the key."""
        client = FakeRedis()
        storage = RedisDocumentStorage(client, "answer_cache:cache")

        storage.write('["bloque 14"]')

        assert client.data["answer_cache:cache"] == '["bloque 14"]'.encode("utf-8")
        assert storage.read() == '["bloque 14"]'

    def test_connection_errors_raise_storage_unavailable(self):
        """Test Redis errors surface as StorageUnavailableError."""
        storage = RedisDocumentStorage(DownRedis(), "answer_cache:cache")

        with pytest.raises(StorageUnavailableError):
            storage.read()
        with pytest.raises(StorageUnavailableError):
            storage.write("[]")

    def test_health_check(self):
        """Test health_check reports whether Redis answers a ping."""
        assert RedisDocumentStorage(FakeRedis(), "k").health_check() is True
        assert RedisDocumentStorage(DownRedis(), "k").health_check() is False

    def test_describe(self):
        """Test describe names the key."""
        assert RedisDocumentStorage(FakeRedis(), "answer_cache:learning").describe() == (
            "redis:answer_cache:learning"
        )
