"""Best-effort sync between the local key-value store and a remote store.

Remote data wins when it is present and non-empty; otherwise the local copy
is pushed. A cooldown between full syncs and an in-flight flag keep
attempts from overlapping. This is a debouncing convention for a single
event loop, not a mutex.
"""

import time
from collections.abc import Callable, Sequence
from typing import Any

import structlog

from ..config import CHAT_HISTORY_KEY, COMMANDS_KEY, MEMORY_STORAGE_KEY, SYNC_COOLDOWN_SECONDS
from ..events import SYNC_COMPLETED, EventEmitter
from ..storage import KeyValueStore
from .base import RemoteStore
from .models import SyncReport, SyncStatus

logger = structlog.get_logger()

DEFAULT_CATEGORIES = (CHAT_HISTORY_KEY, MEMORY_STORAGE_KEY, COMMANDS_KEY)


class SyncService:
    """Synchronizes whole data categories with a remote store."""

    def __init__(
        self,
        local: KeyValueStore,
        remote: RemoteStore,
        user_id: str,
        categories: Sequence[str] = DEFAULT_CATEGORIES,
        cooldown: float = SYNC_COOLDOWN_SECONDS,
        events: EventEmitter | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._local = local
        self._remote = remote
        self._user_id = user_id
        self._categories = tuple(categories)
        self._cooldown = cooldown
        self._events = events
        self._clock = clock
        self._in_flight = False
        self._last_attempt: float | None = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def _skipped(self, categories: Sequence[str], reason: str) -> SyncReport:
        logger.debug("sync_skipped", reason=reason)
        return SyncReport(
            statuses={category: SyncStatus.SKIPPED for category in categories},
            reason=reason,
        )

    def _read_local(self, category: str) -> list[Any] | None:
        try:
            payload = self._local.get_json(category)
        except ValueError as e:
            logger.warning("sync_local_corrupt", category=category, error=str(e))
            return None
        return payload if isinstance(payload, list) else None

    async def _sync_category(self, category: str) -> SyncStatus:
        try:
            remote_payload = await self._remote.fetch(self._user_id, category)
            if remote_payload:
                self._local.set_json(category, remote_payload)
                return SyncStatus.DOWNLOADED

            local_payload = self._read_local(category)
            if not local_payload:
                return SyncStatus.SKIPPED
            await self._remote.push(self._user_id, category, local_payload)
            return SyncStatus.UPLOADED
        except Exception as e:
            logger.error("sync_category_failed", category=category, error=str(e))
            return SyncStatus.FAILED

    async def sync(self, force: bool = False) -> SyncReport:
        """Sync every category: remote wins if non-empty, else push local.

        Args:
            force: Ignore the cooldown (an in-flight sync still wins)

        Returns:
            Per-category report; never raises
        """
        if self._in_flight:
            return self._skipped(self._categories, "in_flight")
        now = self._clock()
        if (
            not force
            and self._last_attempt is not None
            and now - self._last_attempt < self._cooldown
        ):
            return self._skipped(self._categories, "cooldown")

        self._in_flight = True
        self._last_attempt = now
        try:
            statuses = {
                category: await self._sync_category(category)
                for category in self._categories
            }
        finally:
            self._in_flight = False

        report = SyncReport(statuses=statuses)
        logger.info("sync_completed", statuses={k: v.value for k, v in statuses.items()})
        if self._events:
            self._events.emit(SYNC_COMPLETED, ok=report.ok)
        return report

    async def push(self, *categories: str) -> SyncReport:
        """Upload local categories after a local change (no download)."""
        categories = categories or self._categories
        if self._in_flight:
            return self._skipped(categories, "in_flight")

        self._in_flight = True
        statuses: dict[str, SyncStatus] = {}
        try:
            for category in categories:
                payload = self._read_local(category) or []
                try:
                    await self._remote.push(self._user_id, category, payload)
                    statuses[category] = SyncStatus.UPLOADED
                except Exception as e:
                    logger.error("sync_push_failed", category=category, error=str(e))
                    statuses[category] = SyncStatus.FAILED
        finally:
            self._in_flight = False
        return SyncReport(statuses=statuses)
