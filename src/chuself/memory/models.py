"""Data models for the memory store.

Entries keep the camelCase keys of the persisted JSON layout through field
aliases.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..config import DEFAULT_SEARCH_LIMIT


class MemoryEntry(BaseModel):
    """A stored (question, answer) pair from a completed chat turn."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Unique entry identifier")
    timestamp: int = Field(description="Creation time in epoch milliseconds")
    user_input: str = Field(alias="userInput", description="The user's message")
    assistant_reply: str = Field(alias="assistantReply", description="The assistant's reply")
    intent: str | None = Field(default=None, description="Derived intent classification")
    tags: list[str] = Field(default_factory=list, description="Derived keywords")


class MemorySearchParams(BaseModel):
    """Parameters of a relevance search."""

    query: str = Field(description="Free text matched against entries")
    limit: int = Field(default=DEFAULT_SEARCH_LIMIT, ge=1)
    start_date: datetime | None = Field(default=None, description="Inclusive lower time bound")
    end_date: datetime | None = Field(default=None, description="Inclusive upper time bound")
    tags: list[str] | None = Field(default=None, description="Entries must share one of these tags")


class MemorySearchResult(BaseModel):
    """A search hit with its relevance score in [0, 1]."""

    model_config = ConfigDict(frozen=True)

    entry: MemoryEntry
    relevance_score: float
