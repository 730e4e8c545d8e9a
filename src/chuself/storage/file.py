"""File-backed key-value store.

Each key is persisted as ``<directory>/<key>.json``. Writes go through a
temporary file and an atomic rename so a crash never leaves a half-written
value behind.
"""

import os
import re
from pathlib import Path

from .base import KeyValueStore

_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


class FileKeyValueStore(KeyValueStore):
    """Key-value store keeping one file per key in a directory."""

    def __init__(self, directory: str | Path = "~/.chuself"):
        self._directory = Path(directory).expanduser()
        self._directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self._directory.glob("*.json"))

    @property
    def backend_type(self) -> str:
        return "file"

    @property
    def directory(self) -> Path:
        return self._directory
