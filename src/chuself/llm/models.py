from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProviderName(str, Enum):
    """Supported LLM backends."""

    GEMINI = "gemini"
    GROQ = "groq"
    OPENROUTER = "openrouter"


class ModelConfig(BaseModel):
    """The single active model configuration.

    Serialized with the camelCase keys used by the persisted settings blob.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    provider: ProviderName = Field(description="Backend the request is dispatched to")
    model_name: str = Field(default="", alias="modelName", description="Model identifier")
    api_key: str = Field(default="", alias="apiKey", description="Provider API key")
    endpoint: str | None = Field(default=None, description="Optional endpoint override")


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    provider: str = Field(description="Provider that served the request")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )


# Wire-level response shapes. Each provider decodes its body into one of these
# before extracting text, instead of poking into an untyped JSON blob.

class GeminiPart(BaseModel):
    text: str | None = None


class GeminiContent(BaseModel):
    role: str | None = None
    parts: list[GeminiPart] = Field(default_factory=list)


class GeminiCandidate(BaseModel):
    content: GeminiContent | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class GeminiUsage(BaseModel):
    prompt_token_count: int = Field(default=0, alias="promptTokenCount")
    candidates_token_count: int = Field(default=0, alias="candidatesTokenCount")
    total_token_count: int = Field(default=0, alias="totalTokenCount")


class GeminiResponse(BaseModel):
    """Body of a generateContent response."""

    candidates: list[GeminiCandidate] = Field(default_factory=list)
    usage_metadata: GeminiUsage | None = Field(default=None, alias="usageMetadata")

    def text(self) -> str | None:
        """Text of the first candidate, joining its parts."""
        if not self.candidates or self.candidates[0].content is None:
            return None
        texts = [part.text for part in self.candidates[0].content.parts if part.text]
        return "".join(texts) or None

    def usage(self) -> dict[str, int] | None:
        if self.usage_metadata is None:
            return None
        return {
            "prompt_tokens": self.usage_metadata.prompt_token_count,
            "completion_tokens": self.usage_metadata.candidates_token_count,
            "total_tokens": self.usage_metadata.total_token_count,
        }


class CompletionMessage(BaseModel):
    role: str | None = None
    content: str | None = None


class CompletionChoice(BaseModel):
    message: CompletionMessage | None = None


class CompletionUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionResponse(BaseModel):
    """Body of an OpenAI-compatible chat completion."""

    model: str | None = None
    choices: list[CompletionChoice] = Field(default_factory=list)
    usage: CompletionUsage | None = None

    def text(self) -> str | None:
        if not self.choices or self.choices[0].message is None:
            return None
        return self.choices[0].message.content or None
