"""Plain-text rendering of memory search results as chat replies."""

from collections.abc import Sequence
from datetime import datetime

from ..memory.models import MemorySearchResult

NO_MEMORIES_REPLY = "I don't have any memories that match that yet."

PREVIEW_LENGTH = 200


def truncate(text: str, limit: int = PREVIEW_LENGTH) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3].rstrip() + "..."


def format_memory_results(results: Sequence[MemorySearchResult]) -> str:
    """Render search hits, best first, as a bulleted reply."""
    if not results:
        return NO_MEMORIES_REPLY

    lines = ["Here's what I remember:", ""]
    for result in results:
        entry = result.entry
        when = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%b %d, %Y %H:%M")
        lines.append(
            f'- {when}: you said "{truncate(entry.user_input)}" '
            f'and I replied "{truncate(entry.assistant_reply)}"'
        )
    return "\n".join(lines)
