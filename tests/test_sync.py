"""Unit tests for the sync module."""
import pytest

from chuself.config import CHAT_HISTORY_KEY, COMMANDS_KEY, MEMORY_STORAGE_KEY
from chuself.events import SYNC_COMPLETED
from chuself.sync import InMemoryRemoteStore, RemoteStore, SyncService, SyncStatus


class FailingRemoteStore(RemoteStore):
    """Remote store whose every call fails."""

    async def fetch(self, user_id, category):
        raise ConnectionError("backend unavailable")

    async def push(self, user_id, category, payload):
        raise ConnectionError("backend unavailable")


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestSyncService:
    """Tests for SyncService."""

    @pytest.mark.asyncio
    async def test_remote_wins_when_present(self, store):
        """Test that non-empty remote data replaces local data."""
        remote = InMemoryRemoteStore()
        await remote.push("u1", CHAT_HISTORY_KEY, [{"role": "user", "content": "remote", "timestamp": 1}])
        store.set_json(CHAT_HISTORY_KEY, [{"role": "user", "content": "local", "timestamp": 2}])
        service = SyncService(store, remote, "u1")

        report = await service.sync()

        assert report.statuses[CHAT_HISTORY_KEY] == SyncStatus.DOWNLOADED
        assert store.get_json(CHAT_HISTORY_KEY)[0]["content"] == "remote"

    @pytest.mark.asyncio
    async def test_local_pushed_when_remote_empty(self, store):
        """Test that local data is uploaded when the remote has none."""
        remote = InMemoryRemoteStore()
        store.set_json(MEMORY_STORAGE_KEY, [{"id": "1"}])
        service = SyncService(store, remote, "u1")

        report = await service.sync()

        assert report.statuses == {
            CHAT_HISTORY_KEY: SyncStatus.SKIPPED,
            MEMORY_STORAGE_KEY: SyncStatus.UPLOADED,
            COMMANDS_KEY: SyncStatus.SKIPPED,
        }
        assert await remote.fetch("u1", MEMORY_STORAGE_KEY) == [{"id": "1"}]
        assert report.ok

    @pytest.mark.asyncio
    async def test_cooldown(self, store):
        """Test that repeated syncs within the cooldown are skipped."""
        clock = FakeClock()
        remote = InMemoryRemoteStore()
        service = SyncService(store, remote, "u1", cooldown=30.0, clock=clock)

        await service.sync()
        clock.now += 10
        skipped = await service.sync()
        forced = await service.sync(force=True)
        clock.now += 31
        later = await service.sync()

        assert skipped.reason == "cooldown"
        assert set(skipped.statuses.values()) == {SyncStatus.SKIPPED}
        assert forced.reason is None
        assert later.reason is None
        assert remote.fetch_count == 9

    @pytest.mark.asyncio
    async def test_failures_reported_not_raised(self, store):
        """Test that remote errors become FAILED statuses."""
        store.set_json(COMMANDS_KEY, [{"name": "x"}])
        service = SyncService(store, FailingRemoteStore(), "u1")

        report = await service.sync()
        pushed = await service.push(COMMANDS_KEY)

        assert set(report.statuses.values()) == {SyncStatus.FAILED}
        assert not report.ok
        assert pushed.statuses == {COMMANDS_KEY: SyncStatus.FAILED}

    @pytest.mark.asyncio
    async def test_push_uploads_selected_categories(self, store):
        """Test pushing after a local change."""
        remote = InMemoryRemoteStore()
        store.set_json(CHAT_HISTORY_KEY, [{"role": "user", "content": "hi", "timestamp": 1}])
        service = SyncService(store, remote, "u1")

        report = await service.push(CHAT_HISTORY_KEY)

        assert report.statuses == {CHAT_HISTORY_KEY: SyncStatus.UPLOADED}
        assert remote.push_count == 1
        assert remote.fetch_count == 0

    @pytest.mark.asyncio
    async def test_emits_completion_event(self, store, events):
        """Test that listeners hear about completed syncs."""
        payloads = []
        events.subscribe(SYNC_COMPLETED, lambda event, payload: payloads.append(payload))
        service = SyncService(store, InMemoryRemoteStore(), "u1", events=events)

        await service.sync()

        assert payloads == [{"ok": True}]
