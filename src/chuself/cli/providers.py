"""Service factory functions for CLI.

Centralizes creation of the key-value store, the model configuration and the
assistant from environment variables. Hides configuration details from
command implementations.
"""

import os

import structlog
from pydantic import ValidationError
from rich.console import Console

from ..assistant import Assistant
from ..config import DEFAULT_MODELS, MODEL_CONFIG_KEY
from ..events import EventEmitter
from ..history import ConversationHistory
from ..instructions import CommandRepository
from ..llm import SUPPORTED_PROVIDERS, ModelConfig, ProviderDispatcher
from ..memory import MemoryStore
from ..storage import KeyValueStore, create_key_value_store

logger = structlog.get_logger()

# Default console for output
_console = Console()


def get_store() -> KeyValueStore:
    """Create the local key-value store from environment variables.

    Returns:
        File-backed key-value store

    Environment variables:
        CHUSELF_DATA_DIR: Directory holding one JSON file per key (default: ~/.chuself)
    """
    return create_key_value_store(
        "file",
        directory=os.getenv("CHUSELF_DATA_DIR", "~/.chuself"),
    )


def load_saved_model_config(store: KeyValueStore) -> ModelConfig | None:
    """Read the persisted model configuration blob, if any."""
    try:
        raw = store.get_json(MODEL_CONFIG_KEY)
        if raw is None:
            return None
        return ModelConfig.model_validate(raw)
    except (ValueError, ValidationError) as e:
        logger.warning("model_config_corrupt", error=str(e))
        return None


def save_model_config(store: KeyValueStore, config: ModelConfig) -> None:
    store.set_json(MODEL_CONFIG_KEY, config.model_dump(mode="json", by_alias=True))


def get_model_config(store: KeyValueStore, console: Console | None = None) -> ModelConfig | None:
    """Resolve the active model configuration.

    Environment variables take precedence over the persisted blob.

    Args:
        store: Key-value store holding the persisted configuration
        console: Optional Rich console for output

    Returns:
        Model configuration, or None if no provider is configured

    Environment variables:
        CHUSELF_PROVIDER: Provider (gemini, groq, openrouter; default: saved config or gemini)
        GEMINI_API_KEY / GROQ_API_KEY / OPENROUTER_API_KEY: API key for the provider
        GEMINI_MODEL / GROQ_MODEL / OPENROUTER_MODEL: Model override
        GEMINI_ENDPOINT / GROQ_ENDPOINT / OPENROUTER_ENDPOINT: Endpoint override
    """
    con = console or _console
    saved = load_saved_model_config(store)
    provider = os.getenv("CHUSELF_PROVIDER", "").lower()
    if not provider:
        provider = saved.provider.value if saved else "gemini"

    if provider not in SUPPORTED_PROVIDERS:
        con.print(f"[red]Error: Unknown provider: {provider}[/red]")
        return None

    prefix = provider.upper()
    api_key = os.getenv(f"{prefix}_API_KEY")
    if not api_key:
        if saved and saved.provider.value == provider:
            return saved
        con.print(f"[yellow]Warning: {prefix}_API_KEY not set, chat disabled[/yellow]")
        return None

    return ModelConfig(
        provider=provider,
        model_name=os.getenv(f"{prefix}_MODEL", DEFAULT_MODELS[provider]),
        api_key=api_key,
        endpoint=os.getenv(f"{prefix}_ENDPOINT") or None,
    )


def get_history(store: KeyValueStore, events: EventEmitter | None = None) -> ConversationHistory:
    return ConversationHistory(store, events=events)


def get_memory(store: KeyValueStore, events: EventEmitter | None = None) -> MemoryStore:
    return MemoryStore(store, events=events)


def get_commands(store: KeyValueStore, events: EventEmitter | None = None) -> CommandRepository:
    return CommandRepository(store, events=events)


def get_assistant(store: KeyValueStore, console: Console | None = None) -> Assistant:
    """Wire an assistant over the given store.

    Args:
        store: Local key-value store
        console: Optional Rich console for output

    Returns:
        Assistant ready to take turns
    """
    events = EventEmitter()
    return Assistant(
        history=get_history(store, events),
        memory=get_memory(store, events),
        commands=get_commands(store, events),
        dispatcher=ProviderDispatcher(),
        model_config=get_model_config(store, console),
        events=events,
    )
