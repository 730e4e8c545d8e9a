"""Data models for custom commands."""

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class CustomCommand(BaseModel):
    """User-defined instruction injected into the system prompt.

    The optional condition is a free-text time predicate ("before 10am",
    "evening", "at 3pm") evaluated at send time, not at creation time.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(description="Display name of the command")
    instruction: str = Field(description="Text added to the system instruction")
    condition: str | None = Field(default=None, description="Optional time-of-day predicate")

    @property
    def is_conditional(self) -> bool:
        return bool(self.condition and self.condition.strip())
