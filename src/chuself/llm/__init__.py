from .base import LLMProvider
from .dispatcher import ProviderDispatcher
from .errors import (
    ProviderConfigurationError,
    ProviderError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTransportError,
)
from .factory import SUPPORTED_PROVIDERS, create_llm_provider
from .models import LLMResponse, ModelConfig, ProviderName
from .providers import GeminiProvider, GroqProvider, OpenAICompatibleProvider, OpenRouterProvider

__all__ = [
    "LLMProvider",
    "ProviderDispatcher",
    "create_llm_provider",
    "SUPPORTED_PROVIDERS",
    "LLMResponse",
    "ModelConfig",
    "ProviderName",
    "ProviderError",
    "ProviderConfigurationError",
    "ProviderHTTPError",
    "ProviderResponseError",
    "ProviderTransportError",
    "GeminiProvider",
    "GroqProvider",
    "OpenAICompatibleProvider",
    "OpenRouterProvider",
]
