"""Factory for creating key-value store backends."""

from typing import Any

from .base import KeyValueStore


def create_key_value_store(backend: str = "memory", **config: Any) -> KeyValueStore:
    """
    Create a key-value store instance.

    Args:
        backend: Backend type ("memory" or "file")
        **config: Backend-specific configuration
            For file:
                - directory: str | Path (default: '~/.chuself')
            For memory:
                - initial: dict[str, str] | None

    Returns:
        KeyValueStore instance

    Raises:
        ValueError: If backend type is not supported

    Example:
        >>> store = create_key_value_store("file", directory="/tmp/chuself")
        >>> store.set_json("custom-ai-commands", [])
    """
    if backend == "memory":
        from .in_memory import InMemoryKeyValueStore
        return InMemoryKeyValueStore(**config)

    if backend == "file":
        from .file import FileKeyValueStore
        return FileKeyValueStore(**config)

    raise ValueError(
        f"Unsupported storage backend: {backend}. "
        f"Supported backends: memory, file"
    )
