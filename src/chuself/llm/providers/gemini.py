"""Google Gemini LLM provider implementation.

Talks to the generateContent REST endpoint directly with httpx. The API key
travels as the ``key`` query parameter.
Reference: https://ai.google.dev/api/generate-content
"""

from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from ...config import DEFAULT_MODELS, GEMINI_BASE_URL, REQUEST_TIMEOUT_SECONDS
from ...history.models import ChatMessage, Role
from ..base import LLMProvider
from ..errors import ProviderHTTPError, ProviderResponseError, ProviderTransportError
from ..models import GeminiResponse, LLMResponse


class GeminiProvider(LLMProvider):
    """Google Gemini LLM provider implementation.

    Hidden design decisions:
    - Model id normalisation ("models/" prefix)
    - Endpoint templating and API key placement
    - Role mapping: assistant becomes "model", system is folded into "user"
    """

    provider_name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODELS["gemini"],
        endpoint: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Google AI API key
            model: Default model (with or without the "models/" prefix)
            endpoint: Optional endpoint override; "{model}" is substituted
            http_client: Shared client (not closed by this provider)
            timeout: Request timeout in seconds when creating a client
        """
        self._api_key = api_key
        self._model = model
        self._endpoint = endpoint or None
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    @staticmethod
    def model_id(model: str) -> str:
        """Qualify a bare model name with the "models/" resource prefix."""
        return model if "/" in model else f"models/{model}"

    def build_url(self, model_id: str) -> tuple[str, dict[str, str]]:
        """Resolve the request URL and query parameters for a model."""
        if self._endpoint:
            url = self._endpoint.replace("{model}", model_id)
            params = {} if "key=" in url else {"key": self._api_key}
            return url, params
        return f"{GEMINI_BASE_URL}/{model_id}:generateContent", {"key": self._api_key}

    @staticmethod
    def convert_messages(messages: Sequence[ChatMessage]) -> list[dict[str, Any]]:
        """Convert messages to Gemini "contents"."""
        return [
            {
                "role": "model" if msg.role == Role.ASSISTANT else "user",
                "parts": [{"text": msg.content}],
            }
            for msg in messages
        ]

    async def chat_completion(
        self,
        messages: Sequence[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion using Google Gemini.

        Args:
            messages: Conversation context
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Extra top-level request body fields

        Returns:
            LLMResponse with generated content
        """
        model_id = self.model_id(model or self._model)
        url, params = self.build_url(model_id)

        body: dict[str, Any] = {"contents": self.convert_messages(messages), **kwargs}
        generation_config: dict[str, Any] = {}
        if temperature is not None:
            generation_config["temperature"] = temperature
        if max_tokens is not None:
            generation_config["maxOutputTokens"] = max_tokens
        if generation_config:
            body["generationConfig"] = generation_config

        try:
            response = await self._client.post(url, params=params, json=body)
        except httpx.HTTPError as e:
            raise ProviderTransportError(self.provider_name, str(e)) from e

        if not response.is_success:
            raise ProviderHTTPError(self.provider_name, response.status_code, response.text)

        try:
            parsed = GeminiResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ProviderResponseError(self.provider_name, f"malformed response: {e}") from e

        content = parsed.text()
        if content is None:
            raise ProviderResponseError(self.provider_name)

        return LLMResponse(
            content=content,
            model=model_id,
            provider=self.provider_name,
            usage=parsed.usage(),
        )

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()
