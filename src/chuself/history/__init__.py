"""Conversation history for chuself.

Holds the ordered message log and the windowing policy used to build a
bounded provider context.
"""

from .manager import ConversationHistory, epoch_millis
from .models import ChatMessage, Role
from .window import window_for_dispatch

__all__ = [
    "ChatMessage",
    "ConversationHistory",
    "Role",
    "epoch_millis",
    "window_for_dispatch",
]
