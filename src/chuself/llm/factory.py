from typing import Any

from .base import LLMProvider
from .providers import GeminiProvider, GroqProvider, OpenRouterProvider

SUPPORTED_PROVIDERS = ("gemini", "groq", "openrouter")


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type ('gemini', 'groq', 'openrouter')
        **config: Provider configuration, shared by every provider:
            - api_key: str (required)
            - model: str (default: provider specific)
            - endpoint: str | None (URL template for Gemini, base URL otherwise)
            - http_client: httpx.AsyncClient | None
            - timeout: float

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_llm_provider(
        ...     "gemini",
        ...     api_key="...",
        ...     model="gemini-1.5-flash-latest"
        ... )

        >>> provider = create_llm_provider(
        ...     "groq",
        ...     api_key="gsk_...",
        ...     model="llama-3.1-8b-instant"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower not in SUPPORTED_PROVIDERS:
        raise ValueError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: 'gemini', 'groq', 'openrouter'"
        )

    if "api_key" not in config:
        raise TypeError(f"{provider_lower} provider requires 'api_key' in config")

    if provider_lower == "gemini":
        return GeminiProvider(**config)

    if provider_lower == "groq":
        return GroqProvider(**config)

    return OpenRouterProvider(**config)
