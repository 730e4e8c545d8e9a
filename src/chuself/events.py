"""In-process event emitter.

Components publish change notifications (history changed, memory saved, ...)
through an EventEmitter instead of relying on a host-specific storage signal,
so the same core runs under a CLI, a test or any UI framework.
"""

from collections import defaultdict
from collections.abc import Callable
from typing import Any

import structlog

logger = structlog.get_logger()

Listener = Callable[[str, dict[str, Any]], None]

HISTORY_CHANGED = "history.changed"
HISTORY_CLEARED = "history.cleared"
MEMORY_SAVED = "memory.saved"
MEMORY_DELETED = "memory.deleted"
MEMORY_CLEARED = "memory.cleared"
COMMANDS_CHANGED = "commands.changed"
SYNC_COMPLETED = "sync.completed"


class EventEmitter:
    """Synchronous observer registry.

    Listeners are called in subscription order on the emitting call stack.
    A failing listener is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register a listener for an event name ('*' receives every event).

        Returns:
            A callable that removes the subscription
        """
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def emit(self, event: str, **payload: Any) -> None:
        """Deliver an event to its listeners and to wildcard listeners."""
        for listener in [*self._listeners[event], *self._listeners["*"]]:
            try:
                listener(event, payload)
            except Exception as e:
                logger.error("event_listener_failed", event_name=event, error=str(e))

    def listener_count(self, event: str) -> int:
        return len(self._listeners[event])
