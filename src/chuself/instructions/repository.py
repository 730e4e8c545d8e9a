"""Persistence of custom commands."""

from collections.abc import Sequence

import structlog
from pydantic import TypeAdapter, ValidationError

from ..config import COMMANDS_KEY
from ..events import COMMANDS_CHANGED, EventEmitter
from ..storage import KeyValueStore
from .models import CustomCommand

logger = structlog.get_logger()

_commands_adapter = TypeAdapter(list[CustomCommand])


class CommandRepository:
    """Loads and saves the user's custom commands.

    Corrupt persisted data is discarded and treated as "no commands".
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = COMMANDS_KEY,
        events: EventEmitter | None = None,
    ):
        self._store = store
        self._key = key
        self._events = events

    def load(self) -> list[CustomCommand]:
        try:
            raw = self._store.get_json(self._key)
            if raw is None:
                return []
            return _commands_adapter.validate_python(raw)
        except (ValueError, ValidationError) as e:
            logger.warning("commands_corrupt", key=self._key, error=str(e))
            self._store.remove(self._key)
            return []

    def save(self, commands: Sequence[CustomCommand]) -> None:
        self._store.set_json(self._key, [c.model_dump(mode="json") for c in commands])
        logger.info("commands_saved", count=len(commands))
        if self._events:
            self._events.emit(COMMANDS_CHANGED, count=len(commands))

    def add(self, name: str, instruction: str, condition: str | None = None) -> CustomCommand:
        """Create and persist a new command."""
        command = CustomCommand(
            name=name.strip(),
            instruction=instruction.strip(),
            condition=(condition or "").strip() or None,
        )
        self.save([*self.load(), command])
        return command

    def remove(self, command_id: str) -> bool:
        """Delete a command by id. Returns True if it existed."""
        commands = self.load()
        remaining = [c for c in commands if c.id != command_id]
        if len(remaining) == len(commands):
            return False
        self.save(remaining)
        return True
