"""Abstract base class for local key-value storage."""

import json
from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """
    Abstract local key-value store.

    Hides where persisted blobs live (process memory, files on disk, ...).
    Values are opaque JSON strings to everything except the component that
    owns the key. Operations are synchronous.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """
        Read the raw value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored string, or None if the key is absent
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a raw string value under a key, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys."""

    def get_json(self, key: str) -> Any:
        """
        Read and decode a JSON value.

        Returns:
            Decoded value, or None if the key is absent

        Raises:
            ValueError: If the stored value is not valid JSON
        """
        raw = self.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_json(self, key: str, value: Any) -> None:
        """Encode a value as JSON and store it."""
        self.set(key, json.dumps(value))

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
