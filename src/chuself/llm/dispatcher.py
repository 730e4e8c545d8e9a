"""Provider dispatcher.

Single entry point used by callers to send a prepared message list to the
configured provider. Callers select behavior purely via the provider name;
adding a provider means adding a provider class and a factory branch.
"""

from collections.abc import Sequence

import httpx
import structlog

from ..config import NO_API_KEY_REPLY, NO_MODEL_REPLY, REQUEST_TIMEOUT_SECONDS
from ..history.models import ChatMessage
from .errors import ProviderConfigurationError, ProviderError
from .factory import SUPPORTED_PROVIDERS, create_llm_provider
from .models import LLMResponse, ModelConfig, ProviderName

logger = structlog.get_logger()


class ProviderDispatcher:
    """Translates and sends messages to a provider, normalizing the reply.

    Hidden design decisions:
    - Configuration validation before any network I/O
    - Provider construction and cleanup per request
    - Error normalization into ProviderError subclasses

    The dispatcher never mutates history and never retries.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        """Initialize the dispatcher.

        Args:
            http_client: Shared HTTP client handed to every provider
            timeout: Request timeout when providers create their own client
            temperature: Sampling temperature for every request
            max_tokens: Output token limit for every request
        """
        self._http_client = http_client
        self._timeout = timeout
        self._temperature = temperature
        self._max_tokens = max_tokens

    @staticmethod
    def validate(provider: str | ProviderName, config: ModelConfig) -> str:
        """Check that a request can be made, without touching the network.

        Returns:
            Normalized provider name

        Raises:
            ProviderConfigurationError: Unsupported provider, missing key or model
        """
        name = provider.value if isinstance(provider, ProviderName) else str(provider).lower()
        if name not in SUPPORTED_PROVIDERS:
            raise ProviderConfigurationError(f"Unsupported provider: {provider}", provider=name)
        if not config.api_key.strip():
            raise ProviderConfigurationError(NO_API_KEY_REPLY, provider=name)
        if not config.model_name.strip():
            raise ProviderConfigurationError(NO_MODEL_REPLY, provider=name)
        return name

    async def complete(
        self,
        provider: str | ProviderName,
        messages: Sequence[ChatMessage],
        config: ModelConfig,
    ) -> LLMResponse:
        """Send messages and return the full provider response.

        Raises:
            ProviderError: Configuration, HTTP, transport or decoding failure
        """
        name = self.validate(provider, config)
        llm = create_llm_provider(
            name,
            api_key=config.api_key,
            model=config.model_name,
            endpoint=config.endpoint,
            http_client=self._http_client,
            timeout=self._timeout,
        )

        logger.info(
            "provider_request",
            provider=name,
            model=config.model_name,
            message_count=len(messages),
        )
        async with llm:
            try:
                response = await llm.chat_completion(
                    messages,
                    temperature=self._temperature,
                    max_tokens=self._max_tokens,
                )
            except ProviderError as e:
                logger.error("provider_request_failed", provider=name, error=str(e))
                raise

        logger.info("provider_response", provider=name, chars=len(response.content))
        return response

    async def send(
        self,
        provider: str | ProviderName,
        messages: Sequence[ChatMessage],
        config: ModelConfig,
    ) -> str:
        """Send messages and return the reply text.

        Raises:
            ProviderError: Configuration, HTTP, transport or decoding failure
        """
        response = await self.complete(provider, messages, config)
        return response.content
