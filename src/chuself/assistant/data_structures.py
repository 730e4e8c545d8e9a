"""Data structures for the assistant module."""

from pydantic import BaseModel, Field

from ..history.models import ChatMessage
from ..memory.models import MemoryEntry
from ..routing.models import Intent


class TurnResult(BaseModel):
    """Outcome of one user turn.

    Attributes:
        reply: Assistant message appended to history (or a transient busy notice)
        intent: How the utterance was routed
        error: Detailed error text when the turn failed, None otherwise
        memory: Memory entry stored for this turn, if any
    """

    reply: ChatMessage
    intent: Intent
    error: str | None = Field(default=None, description="Diagnostic error, never shown verbatim")
    memory: MemoryEntry | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        """String representation of TurnResult."""
        return self.reply.content
