from .gemini import GeminiProvider
from .groq import GroqProvider
from .openai_compatible import OpenAICompatibleProvider
from .openrouter import OpenRouterProvider

__all__ = ["GeminiProvider", "GroqProvider", "OpenAICompatibleProvider", "OpenRouterProvider"]
