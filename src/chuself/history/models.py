"""Data models for conversation history."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Role of a message sender."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """A single message in a conversation.

    Messages are immutable once created; the timestamp doubles as ordering
    key and identifier within a conversation.
    """

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Role of the message sender")
    content: str = Field(description="Content of the message")
    timestamp: int = Field(description="Creation time in epoch milliseconds")

    @property
    def is_system(self) -> bool:
        return self.role == Role.SYSTEM
