"""
Chuself: a conversational assistant core with multi-provider chat and local memory.

Each subpackage hides one design decision: the history layout and windowing
policy, the instruction conditions, the provider wire formats, the memory
scoring, the intent routing and the sync protocol.
"""

__version__ = "0.1.0"

from .assistant import Assistant, TurnResult
from .events import EventEmitter
from .history import ChatMessage, ConversationHistory, Role, window_for_dispatch
from .instructions import CommandRepository, CustomCommand, InstructionComposer
from .llm import ModelConfig, ProviderDispatcher, ProviderError, ProviderName
from .memory import MemoryEntry, MemorySearchParams, MemoryStore
from .routing import Intent, IntentKind, IntentRouter, ServiceKind
from .storage import KeyValueStore, create_key_value_store

__all__ = [
    "Assistant",
    "ChatMessage",
    "CommandRepository",
    "ConversationHistory",
    "CustomCommand",
    "EventEmitter",
    "Intent",
    "IntentKind",
    "IntentRouter",
    "InstructionComposer",
    "KeyValueStore",
    "MemoryEntry",
    "MemorySearchParams",
    "MemoryStore",
    "ModelConfig",
    "ProviderDispatcher",
    "ProviderError",
    "ProviderName",
    "Role",
    "ServiceKind",
    "TurnResult",
    "create_key_value_store",
    "window_for_dispatch",
]
