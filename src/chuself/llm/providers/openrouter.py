from ...config import APP_TITLE, APP_URL, DEFAULT_MODELS, OPENROUTER_BASE_URL
from .openai_compatible import OpenAICompatibleProvider


class OpenRouterProvider(OpenAICompatibleProvider):
    """OpenRouter provider (OpenAI-compatible API).

    OpenRouter attributes traffic to an application through the
    HTTP-Referer and X-Title headers.
    """

    provider_name = "openrouter"
    default_base_url = OPENROUTER_BASE_URL
    default_model = DEFAULT_MODELS["openrouter"]

    def extra_headers(self) -> dict[str, str]:
        return {"HTTP-Referer": APP_URL, "X-Title": APP_TITLE}
