"""Windowing of conversation history into a bounded provider context."""

from collections.abc import Sequence

from ..config import MAX_HISTORY_LENGTH, WINDOW_STRIDE
from .models import ChatMessage


def window_for_dispatch(
    history: Sequence[ChatMessage],
    max_length: int = MAX_HISTORY_LENGTH,
    stride: int = WINDOW_STRIDE,
) -> list[ChatMessage]:
    """Select a bounded subset of history to send to a provider.

    Short histories are returned unchanged. Longer ones become
    system messages + sparse older context + dense recent context:

    - every system message is kept
    - the most recent ``max_length // 2`` non-system messages are kept as-is
    - from the older non-system messages every ``stride``-th one is sampled,
      and at most ``max_length // 2`` of the latest samples are kept, fewer
      when system messages already use part of the budget

    Args:
        history: Full ordered conversation history
        max_length: Maximum number of messages to send (raised to 2 if lower)
        stride: Sampling stride over older messages (raised to 1 if lower)

    Returns:
        Ordered list of messages, at most ``max_length`` long when the
        history holds at most one system message
    """
    max_length = max(max_length, 2)
    stride = max(stride, 1)

    if len(history) <= max_length:
        return list(history)

    half = max_length // 2
    system_messages = [msg for msg in history if msg.is_system]
    conversation = [msg for msg in history if not msg.is_system]

    recent = conversation[-half:]
    older = conversation[:-half]
    sampled = [msg for index, msg in enumerate(older) if index % stride == 0]

    budget = min(half, max_length - len(system_messages) - len(recent))
    sparse = sampled[-budget:] if budget > 0 else []

    return [*system_messages, *sparse, *recent]
