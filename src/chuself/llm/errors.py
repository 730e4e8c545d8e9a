"""Errors raised by LLM providers and the dispatcher."""


class ProviderError(Exception):
    """Base class for provider errors."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class ProviderConfigurationError(ProviderError):
    """Missing API key, missing model or unsupported provider (detected before any request)."""


class ProviderHTTPError(ProviderError):
    """Provider answered with a non-success HTTP status."""

    def __init__(self, provider: str, status_code: int, body: str):
        super().__init__(
            f"{provider} API request failed with status {status_code}: {body}",
            provider=provider,
        )
        self.status_code = status_code
        self.body = body


class ProviderTransportError(ProviderError):
    """Network failure before a response was received."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"Network error calling {provider}: {message}", provider=provider)


class ProviderResponseError(ProviderError):
    """Successful status but no extractable text in the response body."""

    def __init__(self, provider: str, message: str = "no response content"):
        super().__init__(f"{provider} returned {message}", provider=provider)
