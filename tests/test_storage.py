"""Unit tests for the storage module."""
import pytest

from chuself.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    create_key_value_store,
)


class TestKeyValueStore:
    """Tests for KeyValueStore interface."""

    def test_key_value_store_is_abstract(self):
        """Test that KeyValueStore cannot be instantiated directly."""
        with pytest.raises(TypeError):
            KeyValueStore()  # type: ignore


class TestFactory:
    """Tests for create_key_value_store."""

    def test_create_memory_store(self):
        """Test creating an in-memory store."""
        store = create_key_value_store("memory", initial={"a": "1"})

        assert isinstance(store, InMemoryKeyValueStore)
        assert store.backend_type == "memory"
        assert store.get("a") == "1"

    def test_create_file_store(self, tmp_path):
        """Test creating a file store."""
        store = create_key_value_store("file", directory=tmp_path)

        assert isinstance(store, FileKeyValueStore)
        assert store.directory == tmp_path

    def test_unsupported_backend(self):
        """Test that unknown backends are rejected."""
        with pytest.raises(ValueError, match="Unsupported storage backend"):
            create_key_value_store("redis")


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path):
    """Every key-value backend."""
    if request.param == "file":
        return FileKeyValueStore(tmp_path / "data")
    return InMemoryKeyValueStore()


class TestKeyValueBackends:
    """Behaviour shared by every backend."""

    def test_set_get_remove(self, any_store):
        """Test the basic key lifecycle."""
        assert any_store.get("gemini-chat-history") is None

        any_store.set("gemini-chat-history", "[]")
        assert any_store.get("gemini-chat-history") == "[]"
        assert any_store.keys() == ["gemini-chat-history"]

        any_store.remove("gemini-chat-history")
        any_store.remove("gemini-chat-history")
        assert any_store.get("gemini-chat-history") is None

    def test_json_helpers(self, any_store):
        """Test JSON encoding and decoding."""
        any_store.set_json("custom-ai-commands", [{"name": "tone"}])

        assert any_store.get_json("custom-ai-commands") == [{"name": "tone"}]
        assert any_store.get_json("missing") is None

    def test_invalid_json(self, any_store):
        """Test that undecodable values raise ValueError."""
        any_store.set("chat-memory-storage", "{oops")

        with pytest.raises(ValueError):
            any_store.get_json("chat-memory-storage")


class TestFileKeyValueStore:
    """Tests for FileKeyValueStore."""

    def test_one_file_per_key(self, tmp_path):
        """Test the on-disk layout."""
        store = FileKeyValueStore(tmp_path)
        store.set("ai-model-config", '{"provider": "gemini"}')

        assert (tmp_path / "ai-model-config.json").read_text() == '{"provider": "gemini"}'
        assert not list(tmp_path.glob("*.tmp"))

    def test_rejects_path_traversal(self, tmp_path):
        """Test that keys cannot escape the directory."""
        store = FileKeyValueStore(tmp_path)

        with pytest.raises(ValueError):
            store.set("../outside", "x")
