"""Conversation history manager.

Owns the ordered, append-only message log of a conversation and keeps it
persisted in a key-value store. Malformed persisted data is discarded rather
than raised.
"""

import time
from collections.abc import Callable, Sequence

import structlog
from pydantic import TypeAdapter, ValidationError

from ..config import CHAT_HISTORY_KEY, MAX_RETAINED_MESSAGES
from ..events import HISTORY_CHANGED, HISTORY_CLEARED, EventEmitter
from ..storage import KeyValueStore
from .models import ChatMessage, Role

logger = structlog.get_logger()

_messages_adapter = TypeAdapter(list[ChatMessage])


def epoch_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class ConversationHistory:
    """Ordered message log with bounded retention.

    Hidden design decisions:
    - Storage key and JSON layout of the persisted log
    - Retention policy (oldest non-system messages dropped first)
    - Monotonic timestamp assignment for new messages
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = CHAT_HISTORY_KEY,
        max_retained: int = MAX_RETAINED_MESSAGES,
        events: EventEmitter | None = None,
        clock: Callable[[], int] = epoch_millis,
    ):
        """Initialize the manager and load any persisted history.

        Args:
            store: Key-value store holding the persisted log
            key: Storage key for the log
            max_retained: Maximum number of messages kept
            events: Optional emitter notified on changes
            clock: Source of epoch-millisecond timestamps
        """
        self._store = store
        self._key = key
        self._max_retained = max_retained
        self._events = events
        self._clock = clock
        self._messages: list[ChatMessage] = self._load()
        self._last_timestamp = max((m.timestamp for m in self._messages), default=0)

    def _load(self) -> list[ChatMessage]:
        try:
            raw = self._store.get_json(self._key)
            if raw is None:
                return []
            messages = _messages_adapter.validate_python(raw)
        except (ValueError, ValidationError) as e:
            logger.warning("chat_history_corrupt", key=self._key, error=str(e))
            self._discard()
            return []
        except OSError as e:
            logger.error("chat_history_unreadable", key=self._key, error=str(e))
            return []

        logger.info("chat_history_loaded", count=len(messages))
        return messages

    def _discard(self) -> None:
        try:
            self._store.remove(self._key)
        except OSError as e:
            logger.error("chat_history_remove_failed", key=self._key, error=str(e))

    def reload(self) -> None:
        """Re-read the persisted log (after a sync download)."""
        self._messages = self._load()
        self._last_timestamp = max(
            [self._last_timestamp, *(m.timestamp for m in self._messages)]
        )

    def _persist(self) -> None:
        if not self._messages:
            self._discard()
        else:
            try:
                self._store.set_json(
                    self._key, [m.model_dump(mode="json") for m in self._messages]
                )
            except OSError as e:
                logger.error("chat_history_write_failed", key=self._key, error=str(e))
        if self._events:
            self._events.emit(HISTORY_CHANGED, count=len(self._messages))

    def _trim(self) -> None:
        excess = len(self._messages) - self._max_retained
        if excess <= 0:
            return
        kept: list[ChatMessage] = []
        for msg in self._messages:
            if excess > 0 and not msg.is_system:
                excess -= 1
                continue
            kept.append(msg)
        self._messages = kept

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Snapshot of the current log, oldest first."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def next_timestamp(self) -> int:
        """Return a timestamp strictly greater than any issued so far."""
        timestamp = max(self._clock(), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        return timestamp

    def new_message(self, role: Role, content: str) -> ChatMessage:
        """Build a message stamped with the next timestamp (not appended)."""
        return ChatMessage(role=role, content=content, timestamp=self.next_timestamp())

    def append(self, message: ChatMessage) -> bool:
        """Append a message to the end of the log.

        User and assistant messages with blank content are ignored.

        Returns:
            True if the message was appended
        """
        if message.role != Role.SYSTEM and not message.content.strip():
            logger.warning("empty_message_ignored", role=message.role.value)
            return False

        self._messages.append(message)
        self._last_timestamp = max(self._last_timestamp, message.timestamp)
        self._trim()
        self._persist()
        return True

    def replace(self, messages: Sequence[ChatMessage]) -> None:
        """Replace the whole log (regenerate, sync download)."""
        self._messages = list(messages)
        self._last_timestamp = max(
            [self._last_timestamp, *(m.timestamp for m in self._messages)]
        )
        self._trim()
        self._persist()

    def delete(self, timestamp: int) -> bool:
        """Remove the message with the given timestamp.

        Returns:
            True if a message was removed
        """
        remaining = [m for m in self._messages if m.timestamp != timestamp]
        if len(remaining) == len(self._messages):
            return False
        self._messages = remaining
        self._persist()
        return True

    def truncate_before(self, timestamp: int) -> list[ChatMessage]:
        """Messages strictly older than the given timestamp."""
        return [m for m in self._messages if m.timestamp < timestamp]

    def clear(self) -> None:
        """Empty the log and drop its persisted copy."""
        self._messages = []
        self._discard()
        logger.info("chat_history_cleared")
        if self._events:
            self._events.emit(HISTORY_CLEARED)
