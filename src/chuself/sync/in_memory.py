"""In-memory remote store for offline use and tests."""

import copy
from typing import Any

from .base import RemoteStore


class InMemoryRemoteStore(RemoteStore):
    """Dict-backed remote store."""

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], list[Any]] = {}
        self.push_count = 0
        self.fetch_count = 0

    async def fetch(self, user_id: str, category: str) -> list[Any] | None:
        self.fetch_count += 1
        payload = self._data.get((user_id, category))
        return copy.deepcopy(payload) if payload is not None else None

    async def push(self, user_id: str, category: str, payload: list[Any]) -> None:
        self.push_count += 1
        self._data[(user_id, category)] = copy.deepcopy(payload)
