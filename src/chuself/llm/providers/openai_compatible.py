"""OpenAI-compatible chat completion providers.

Groq and OpenRouter both expose the OpenAI chat completions API, so they
share one implementation built on the OpenAI SDK with a different base URL.
"""

from collections.abc import Sequence
from typing import Any

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI
from pydantic import ValidationError

from ...config import REQUEST_TIMEOUT_SECONDS
from ...history.models import ChatMessage
from ..base import LLMProvider
from ..errors import ProviderHTTPError, ProviderResponseError, ProviderTransportError
from ..models import ChatCompletionResponse, LLMResponse


class OpenAICompatibleProvider(LLMProvider):
    """LLM provider for any OpenAI-compatible endpoint.

    Hidden design decisions:
    - API client initialization (via OpenAI SDK, retries disabled)
    - Bearer token authentication
    - Decoding of the raw completion body
    """

    provider_name = "openai-compatible"
    default_base_url = "https://api.openai.com/v1"
    default_model = "gpt-4o-mini"

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        endpoint: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        **client_kwargs: Any
    ):
        """Initialize the provider.

        Args:
            api_key: Provider API key, sent as a Bearer token
            model: Default model to use
            endpoint: Base URL override (without "/chat/completions")
            http_client: Shared client (not closed by this provider)
            timeout: Request timeout in seconds
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model or self.default_model
        self._owns_client = http_client is None
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=endpoint or self.default_base_url,
            max_retries=0,
            timeout=timeout,
            http_client=http_client,
            default_headers=self.extra_headers(),
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    def extra_headers(self) -> dict[str, str]:
        """Provider-specific headers added to every request."""
        return {}

    async def chat_completion(
        self,
        messages: Sequence[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion.

        Args:
            messages: Conversation context
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional request parameters

        Returns:
            LLMResponse with generated content
        """
        model_to_use = model or self._model
        params: dict[str, Any] = dict(kwargs)
        if temperature is not None:
            params["temperature"] = temperature
        if max_tokens is not None:
            params["max_tokens"] = max_tokens

        try:
            raw = await self._client.chat.completions.with_raw_response.create(
                model=model_to_use,
                messages=[
                    {"role": msg.role.value, "content": msg.content}
                    for msg in messages
                ],
                **params
            )
        except APIStatusError as e:
            raise ProviderHTTPError(self.provider_name, e.status_code, e.response.text) from e
        except APIConnectionError as e:
            raise ProviderTransportError(self.provider_name, str(e)) from e

        try:
            parsed = ChatCompletionResponse.model_validate(raw.http_response.json())
        except (ValueError, ValidationError) as e:
            raise ProviderResponseError(self.provider_name, f"malformed response: {e}") from e

        content = parsed.text()
        if content is None:
            raise ProviderResponseError(self.provider_name)

        usage = None
        if parsed.usage is not None:
            usage = parsed.usage.model_dump()

        return LLMResponse(
            content=content,
            model=parsed.model or model_to_use,
            provider=self.provider_name,
            usage=usage,
        )

    async def close(self) -> None:
        """Close the OpenAI client unless the HTTP client was shared.

        See: https://github.com/openai/openai-python#async-usage
        """
        if self._owns_client:
            await self._client.close()
