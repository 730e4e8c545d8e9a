"""Turn orchestration for chuself."""

from .assistant import Assistant
from .data_structures import TurnResult
from .formatting import NO_MEMORIES_REPLY, format_memory_results

__all__ = ["Assistant", "NO_MEMORIES_REPLY", "TurnResult", "format_memory_results"]
