"""Memory store with relevance search.

Keeps one entry per completed chat turn, newest first, bounded in size.
Every public method degrades to an empty result on storage problems
instead of raising.
"""

import time
from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

import structlog
from pydantic import TypeAdapter, ValidationError

from ..config import DEFAULT_SEARCH_LIMIT, MAX_MEMORIES, MEMORY_STORAGE_KEY, MIN_RELEVANCE_SCORE
from ..events import MEMORY_CLEARED, MEMORY_DELETED, MEMORY_SAVED, EventEmitter
from ..storage import KeyValueStore
from .analysis import classify_intent, extract_key_terms, extract_tags
from .models import MemoryEntry, MemorySearchParams, MemorySearchResult
from .query import NaturalLanguageQueryParser, QueryParser
from .scoring import relevance_score

logger = structlog.get_logger()

_entries_adapter = TypeAdapter(list[MemoryEntry])


def _to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class MemoryStore:
    """Stores (question, answer) pairs and retrieves them by relevance.

    Hidden design decisions:
    - Persisted layout (a JSON array, newest entry first)
    - Eviction policy (insert at front, truncate at tail)
    - Relevance scoring and natural-language query parsing
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = MEMORY_STORAGE_KEY,
        max_memories: int = MAX_MEMORIES,
        parser: QueryParser | None = None,
        events: EventEmitter | None = None,
        clock: Callable[[], int] | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        """Initialize the memory store.

        Args:
            store: Key-value store holding the entries
            key: Storage key
            max_memories: Maximum number of entries kept
            parser: Query parser for natural-language searches
            events: Optional emitter notified on changes
            clock: Source of epoch-millisecond timestamps
            id_factory: Source of entry ids
        """
        self._store = store
        self._key = key
        self._max_memories = max_memories
        self._parser = parser or NaturalLanguageQueryParser()
        self._events = events
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._id_factory = id_factory or (lambda: str(uuid4()))

    @property
    def max_memories(self) -> int:
        return self._max_memories

    def get_all(self) -> list[MemoryEntry]:
        """All entries, newest first."""
        try:
            raw = self._store.get_json(self._key)
            if raw is None:
                return []
            return _entries_adapter.validate_python(raw)
        except (ValueError, ValidationError) as e:
            logger.warning("memory_storage_corrupt", key=self._key, error=str(e))
            self._discard()
            return []
        except OSError as e:
            logger.error("memory_storage_unreadable", key=self._key, error=str(e))
            return []

    def _write(self, entries: list[MemoryEntry]) -> bool:
        try:
            self._store.set_json(
                self._key, [e.model_dump(mode="json", by_alias=True) for e in entries]
            )
        except (OSError, ValueError) as e:
            logger.error("memory_storage_write_failed", key=self._key, error=str(e))
            return False
        return True

    def get(self, entry_id: str) -> MemoryEntry | None:
        return next((e for e in self.get_all() if e.id == entry_id), None)

    def save(self, user_input: str, assistant_reply: str) -> MemoryEntry | None:
        """Store a chat turn as a new memory entry.

        Returns:
            The stored entry, or None if it could not be persisted
        """
        entry = MemoryEntry(
            id=self._id_factory(),
            timestamp=self._clock(),
            user_input=user_input,
            assistant_reply=assistant_reply,
            intent=classify_intent(user_input),
            tags=extract_tags(user_input, assistant_reply),
        )

        entries = [entry, *self.get_all()][: self._max_memories]
        if not self._write(entries):
            return None

        logger.info("memory_saved", id=entry.id, intent=entry.intent, tags=entry.tags)
        if self._events:
            self._events.emit(MEMORY_SAVED, id=entry.id)
        return entry

    def delete(self, entry_id: str) -> bool:
        """Delete one entry. Returns True if it existed."""
        entries = self.get_all()
        remaining = [e for e in entries if e.id != entry_id]
        if len(remaining) == len(entries) or not self._write(remaining):
            return False
        if self._events:
            self._events.emit(MEMORY_DELETED, id=entry_id)
        return True

    def replace_all(self, entries: list[MemoryEntry]) -> None:
        """Replace every entry (sync download), keeping the size bound."""
        self._write(entries[: self._max_memories])

    def _discard(self) -> bool:
        try:
            self._store.remove(self._key)
        except OSError as e:
            logger.error("memory_storage_remove_failed", key=self._key, error=str(e))
            return False
        return True

    def clear(self) -> None:
        """Delete every entry."""
        if not self._discard():
            return
        logger.info("memory_cleared")
        if self._events:
            self._events.emit(MEMORY_CLEARED)

    def search(
        self,
        params: MemorySearchParams,
        now: datetime | None = None,
    ) -> list[MemorySearchResult]:
        """Rank entries by relevance to a query.

        Entries are filtered by date range and tag intersection, scored,
        dropped at or below the minimum relevance, sorted by descending
        score and capped to the limit.
        """
        entries = self.get_all()
        if not entries:
            return []

        if params.start_date is not None:
            start = _to_millis(params.start_date)
            entries = [e for e in entries if e.timestamp >= start]
        if params.end_date is not None:
            end = _to_millis(params.end_date)
            entries = [e for e in entries if e.timestamp <= end]
        if params.tags:
            wanted = set(params.tags)
            entries = [e for e in entries if wanted.intersection(e.tags)]

        now_ms = _to_millis(now) if now is not None else self._clock()
        key_terms = extract_key_terms(params.query)
        results = [
            MemorySearchResult(
                entry=entry,
                relevance_score=relevance_score(params.query, key_terms, entry, now_ms),
            )
            for entry in entries
        ]

        results = [r for r in results if r.relevance_score > MIN_RELEVANCE_SCORE]
        results.sort(key=lambda r: r.relevance_score, reverse=True)
        return results[: params.limit]

    def parse_natural_language_query(
        self,
        text: str,
        now: datetime | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> MemorySearchParams:
        return self._parser.parse(text, now=now, limit=limit)

    def search_text(
        self,
        text: str,
        limit: int = DEFAULT_SEARCH_LIMIT,
        now: datetime | None = None,
    ) -> list[MemorySearchResult]:
        """Parse a natural-language query and search with it.

        Tags derived from query words only narrow the search; when they
        filter out everything the search is retried without them.
        """
        params = self.parse_natural_language_query(text, now=now, limit=limit)
        results = self.search(params, now=now)
        if not results and params.tags:
            results = self.search(params.model_copy(update={"tags": None}), now=now)
        return results
