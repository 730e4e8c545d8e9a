from ...config import DEFAULT_MODELS, GROQ_BASE_URL
from .openai_compatible import OpenAICompatibleProvider


class GroqProvider(OpenAICompatibleProvider):
    """Groq provider (OpenAI-compatible API)."""

    provider_name = "groq"
    default_base_url = GROQ_BASE_URL
    default_model = DEFAULT_MODELS["groq"]
