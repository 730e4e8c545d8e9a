"""Local key-value storage for chuself."""

from .base import KeyValueStore
from .factory import create_key_value_store
from .file import FileKeyValueStore
from .in_memory import InMemoryKeyValueStore

__all__ = [
    "KeyValueStore",
    "create_key_value_store",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
]
