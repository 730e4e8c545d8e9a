from enum import Enum

from pydantic import BaseModel, ConfigDict


class IntentKind(str, Enum):
    """How an utterance is handled."""

    MEMORY_QUERY = "memory_query"
    SERVICE_REQUEST = "service_request"
    CHAT = "chat"


class ServiceKind(str, Enum):
    """External integrations a request can be delegated to."""

    GMAIL = "gmail"
    CALENDAR = "calendar"
    DRIVE = "drive"


class Intent(BaseModel):
    """Classification of a user utterance.

    ``service`` is set only for SERVICE_REQUEST intents.
    """

    model_config = ConfigDict(frozen=True)

    kind: IntentKind
    service: ServiceKind | None = None

    @classmethod
    def memory_query(cls) -> "Intent":
        return cls(kind=IntentKind.MEMORY_QUERY)

    @classmethod
    def service_request(cls, service: ServiceKind) -> "Intent":
        return cls(kind=IntentKind.SERVICE_REQUEST, service=service)

    @classmethod
    def chat(cls) -> "Intent":
        return cls(kind=IntentKind.CHAT)
