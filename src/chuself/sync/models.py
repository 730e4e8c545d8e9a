from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SyncStatus(str, Enum):
    """Outcome of syncing one data category."""

    DOWNLOADED = "downloaded"
    UPLOADED = "uploaded"
    SKIPPED = "skipped"
    FAILED = "failed"


class SyncReport(BaseModel):
    """Per-category outcome of a sync attempt."""

    statuses: dict[str, SyncStatus] = Field(default_factory=dict)
    completed_at: datetime = Field(default_factory=datetime.now)
    reason: str | None = Field(default=None, description="Why the attempt was skipped, if it was")

    @property
    def ok(self) -> bool:
        return SyncStatus.FAILED not in self.statuses.values()
