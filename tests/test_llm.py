"""Unit tests for the LLM module."""
import httpx
import pytest

from chuself.config import APP_TITLE, NO_API_KEY_REPLY, NO_MODEL_REPLY
from chuself.history import ChatMessage, Role
from chuself.llm import (
    GeminiProvider,
    GroqProvider,
    LLMProvider,
    ModelConfig,
    OpenRouterProvider,
    ProviderConfigurationError,
    ProviderDispatcher,
    ProviderHTTPError,
    ProviderName,
    ProviderResponseError,
    ProviderTransportError,
    create_llm_provider,
)

CONVERSATION = [
    ChatMessage(role=Role.SYSTEM, content="Be brief", timestamp=999),
    ChatMessage(role=Role.USER, content="Hello", timestamp=1000),
    ChatMessage(role=Role.ASSISTANT, content="Hi!", timestamp=1001),
    ChatMessage(role=Role.USER, content="How are you?", timestamp=1002),
]


def config_for(provider: str, api_key: str = "test-key", model: str = "test-model", **kwargs) -> ModelConfig:
    return ModelConfig(provider=provider, model_name=model, api_key=api_key, **kwargs)


class TestLLMProvider:
    """Tests for LLMProvider interface."""

    def test_llm_provider_is_abstract(self):
        """Test that LLMProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            LLMProvider()  # type: ignore


class TestFactory:
    """Tests for create_llm_provider."""

    @pytest.mark.parametrize(
        ("name", "cls"),
        [("gemini", GeminiProvider), ("groq", GroqProvider), ("OpenRouter", OpenRouterProvider)],
    )
    def test_create_provider(self, name, cls):
        """Test creating each supported provider."""
        provider = create_llm_provider(name, api_key="key")
        assert isinstance(provider, cls)

    def test_unsupported_provider(self):
        """Test that unknown providers are rejected."""
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_llm_provider("deepseek", api_key="key")

    def test_missing_api_key(self):
        """Test that api_key is required."""
        with pytest.raises(TypeError):
            create_llm_provider("gemini")


class TestModelConfig:
    """Tests for the ModelConfig model."""

    def test_parse_persisted_blob(self):
        """Test reading the camelCase settings layout."""
        config = ModelConfig.model_validate(
            {"provider": "groq", "modelName": "llama-3.1-8b-instant", "apiKey": "gsk"}
        )

        assert config.provider == ProviderName.GROQ
        assert config.model_name == "llama-3.1-8b-instant"
        assert config.endpoint is None

    def test_unknown_provider_rejected(self):
        """Test that the provider field is an enum."""
        with pytest.raises(ValueError):
            ModelConfig(provider="mistral", model_name="m", api_key="k")


class TestGeminiProvider:
    """Tests for the Gemini wire format."""

    @pytest.mark.asyncio
    async def test_request_format(self, mock_transport, gemini_reply):
        """Test URL, key placement and role mapping."""
        transport = mock_transport(200, gemini_reply("Fine, thanks"))
        async with httpx.AsyncClient(transport=transport) as client:
            provider = GeminiProvider(api_key="test-key", model="gemini-1.5-flash-latest", http_client=client)
            response = await provider.chat_completion(CONVERSATION)

        request = transport.requests[0]
        assert request.method == "POST"
        assert request.url.host == "generativelanguage.googleapis.com"
        assert request.url.path == "/v1beta/models/gemini-1.5-flash-latest:generateContent"
        assert request.url.params["key"] == "test-key"
        assert "authorization" not in request.headers

        contents = transport.last_json["contents"]
        assert [c["role"] for c in contents] == ["user", "user", "model", "user"]
        assert contents[2]["parts"] == [{"text": "Hi!"}]

        assert response.content == "Fine, thanks"
        assert response.provider == "gemini"
        assert response.usage == {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5}

    @pytest.mark.asyncio
    async def test_generation_config(self, mock_transport, gemini_reply):
        """Test that sampling options go into generationConfig."""
        transport = mock_transport(200, gemini_reply())
        async with httpx.AsyncClient(transport=transport) as client:
            provider = GeminiProvider(api_key="k", http_client=client)
            await provider.chat_completion(CONVERSATION, temperature=0.2, max_tokens=64)

        assert transport.last_json["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 64}

    @pytest.mark.asyncio
    async def test_endpoint_override(self, mock_transport, gemini_reply):
        """Test that an endpoint template receives the model id."""
        transport = mock_transport(200, gemini_reply())
        async with httpx.AsyncClient(transport=transport) as client:
            provider = GeminiProvider(
                api_key="k",
                model="models/gemini-pro",
                endpoint="https://proxy.example.com/{model}:generateContent",
                http_client=client,
            )
            await provider.chat_completion(CONVERSATION)

        request = transport.requests[0]
        assert request.url.host == "proxy.example.com"
        assert request.url.path == "/models/gemini-pro:generateContent"
        assert request.url.params["key"] == "k"

    def test_endpoint_with_embedded_key(self):
        """Test that a key already in the endpoint is not duplicated."""
        provider = GeminiProvider(api_key="k", endpoint="https://proxy.example.com/x?key=abc")
        assert provider.build_url("models/m") == ("https://proxy.example.com/x?key=abc", {})

    @pytest.mark.asyncio
    async def test_rate_limit_single_attempt(self, mock_transport):
        """Test that a 429 raises without retrying."""
        transport = mock_transport(429, '{"error": {"message": "quota"}}')
        async with httpx.AsyncClient(transport=transport) as client:
            provider = GeminiProvider(api_key="k", http_client=client)
            with pytest.raises(ProviderHTTPError) as exc_info:
                await provider.chat_completion(CONVERSATION)

        assert exc_info.value.status_code == 429
        assert "quota" in str(exc_info.value)
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"candidates": []},
            {"candidates": [{"content": {"parts": []}}]},
            {"promptFeedback": {"blockReason": "SAFETY"}},
        ],
    )
    async def test_missing_text(self, mock_transport, body):
        """Test that a success without text is a response error."""
        transport = mock_transport(200, body)
        async with httpx.AsyncClient(transport=transport) as client:
            provider = GeminiProvider(api_key="k", http_client=client)
            with pytest.raises(ProviderResponseError):
                await provider.chat_completion(CONVERSATION)

    @pytest.mark.asyncio
    async def test_malformed_body(self, mock_transport):
        """Test that a non-JSON body is a response error."""
        transport = mock_transport(200, "<html>oops</html>")
        async with httpx.AsyncClient(transport=transport) as client:
            provider = GeminiProvider(api_key="k", http_client=client)
            with pytest.raises(ProviderResponseError):
                await provider.chat_completion(CONVERSATION)

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        """Test that network errors become transport errors."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            provider = GeminiProvider(api_key="k", http_client=client)
            with pytest.raises(ProviderTransportError):
                await provider.chat_completion(CONVERSATION)

    @pytest.mark.asyncio
    async def test_shared_client_not_closed(self, mock_transport, gemini_reply):
        """Test that an injected client survives the provider."""
        async with httpx.AsyncClient(transport=mock_transport(200, gemini_reply())) as client:
            async with GeminiProvider(api_key="k", http_client=client):
                pass
            assert not client.is_closed


class TestOpenAICompatibleProviders:
    """Tests for Groq and OpenRouter."""

    @pytest.mark.asyncio
    async def test_groq_request(self, mock_transport, completion_reply):
        """Test Bearer auth, URL and message format for Groq."""
        transport = mock_transport(200, completion_reply("Doing well"))
        async with httpx.AsyncClient(transport=transport) as client:
            provider = GroqProvider(api_key="gsk-test", model="llama-3.1-8b-instant", http_client=client)
            response = await provider.chat_completion(CONVERSATION)

        request = transport.requests[0]
        assert str(request.url) == "https://api.groq.com/openai/v1/chat/completions"
        assert request.headers["authorization"] == "Bearer gsk-test"

        body = transport.last_json
        assert body["model"] == "llama-3.1-8b-instant"
        assert body["messages"][0] == {"role": "system", "content": "Be brief"}
        assert [m["role"] for m in body["messages"]] == ["system", "user", "assistant", "user"]

        assert response.content == "Doing well"
        assert response.provider == "groq"
        assert response.usage == {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5}

    @pytest.mark.asyncio
    async def test_openrouter_headers(self, mock_transport, completion_reply):
        """Test Bearer auth and attribution headers for OpenRouter."""
        transport = mock_transport(200, completion_reply(model="openai/gpt-4o-mini"))
        async with httpx.AsyncClient(transport=transport) as client:
            provider = OpenRouterProvider(api_key="sk-or", http_client=client)
            await provider.chat_completion(CONVERSATION)

        request = transport.requests[0]
        assert str(request.url) == "https://openrouter.ai/api/v1/chat/completions"
        assert request.headers["authorization"] == "Bearer sk-or"
        assert request.headers["x-title"] == APP_TITLE
        assert "http-referer" in request.headers
        assert transport.last_json["model"] == "openai/gpt-4o-mini"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("cls", [GroqProvider, OpenRouterProvider])
    async def test_rate_limit_single_attempt(self, mock_transport, cls):
        """Test that a 429 raises an HTTP error after exactly one request."""
        transport = mock_transport(429, {"error": {"message": "rate limited"}})
        async with httpx.AsyncClient(transport=transport) as client:
            provider = cls(api_key="k", http_client=client)
            with pytest.raises(ProviderHTTPError) as exc_info:
                await provider.chat_completion(CONVERSATION)

        assert exc_info.value.status_code == 429
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_empty_content(self, mock_transport, completion_reply):
        """Test that a completion without content is a response error."""
        transport = mock_transport(200, completion_reply(text=""))
        async with httpx.AsyncClient(transport=transport) as client:
            provider = GroqProvider(api_key="k", http_client=client)
            with pytest.raises(ProviderResponseError):
                await provider.chat_completion(CONVERSATION)

    @pytest.mark.asyncio
    async def test_endpoint_override(self, mock_transport, completion_reply):
        """Test that the endpoint replaces the base URL."""
        transport = mock_transport(200, completion_reply())
        async with httpx.AsyncClient(transport=transport) as client:
            provider = GroqProvider(api_key="k", endpoint="https://gateway.example.com/v1", http_client=client)
            await provider.chat_completion(CONVERSATION)

        assert str(transport.requests[0].url) == "https://gateway.example.com/v1/chat/completions"


class TestProviderDispatcher:
    """Tests for ProviderDispatcher."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("config", "message"),
        [
            (config_for("gemini", api_key=""), NO_API_KEY_REPLY),
            (config_for("groq", api_key="   "), NO_API_KEY_REPLY),
            (config_for("openrouter", model=""), NO_MODEL_REPLY),
        ],
    )
    async def test_configuration_errors_before_io(self, mock_transport, config, message):
        """Test that invalid configuration fails without a network call."""
        transport = mock_transport(200, {})
        async with httpx.AsyncClient(transport=transport) as client:
            dispatcher = ProviderDispatcher(http_client=client)
            with pytest.raises(ProviderConfigurationError, match=message):
                await dispatcher.send(config.provider, CONVERSATION, config)

        assert transport.requests == []

    def test_unsupported_provider(self):
        """Test that an unknown provider name is a configuration error."""
        with pytest.raises(ProviderConfigurationError, match="Unsupported provider"):
            ProviderDispatcher.validate("mistral", config_for("gemini"))

    @pytest.mark.asyncio
    async def test_send_gemini(self, mock_transport, gemini_reply):
        """Test dispatching by provider name."""
        transport = mock_transport(200, gemini_reply("Hi there"))
        async with httpx.AsyncClient(transport=transport) as client:
            dispatcher = ProviderDispatcher(http_client=client, temperature=0.5)
            reply = await dispatcher.send("gemini", CONVERSATION, config_for("gemini"))

        assert reply == "Hi there"
        assert transport.requests[0].url.path == "/v1beta/models/test-model:generateContent"
        assert transport.last_json["generationConfig"] == {"temperature": 0.5}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider", ["gemini", "groq", "openrouter"])
    async def test_rate_limit_propagates_once(self, mock_transport, provider):
        """Test that a 429 is reported after a single request for every provider."""
        transport = mock_transport(429, {"error": {"message": "slow down"}})
        async with httpx.AsyncClient(transport=transport) as client:
            dispatcher = ProviderDispatcher(http_client=client)
            with pytest.raises(ProviderHTTPError):
                await dispatcher.send(provider, CONVERSATION, config_for(provider))

        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_complete_returns_metadata(self, mock_transport, completion_reply):
        """Test that complete exposes the normalized response."""
        transport = mock_transport(200, completion_reply(model="llama-3.1-8b-instant"))
        async with httpx.AsyncClient(transport=transport) as client:
            dispatcher = ProviderDispatcher(http_client=client)
            response = await dispatcher.complete(ProviderName.GROQ, CONVERSATION, config_for("groq"))

        assert response.provider == "groq"
        assert response.model == "llama-3.1-8b-instant"
