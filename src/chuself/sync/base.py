"""Abstract remote store used for best-effort sync."""

from abc import ABC, abstractmethod
from typing import Any


class RemoteStore(ABC):
    """Remote copy of whole data categories keyed by an opaque user id.

    The concrete backend and its protocol are outside chuself; hosts plug
    in an implementation. Last writer wins per category, no field merge.
    """

    @abstractmethod
    async def fetch(self, user_id: str, category: str) -> list[Any] | None:
        """Return the stored payload of a category, or None if absent."""

    @abstractmethod
    async def push(self, user_id: str, category: str, payload: list[Any]) -> None:
        """Replace the stored payload of a category.

        Raises:
            Exception: Backend-specific failures
        """
