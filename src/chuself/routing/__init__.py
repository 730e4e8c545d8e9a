"""Intent routing for incoming user utterances."""

from .base import ServiceHandler
from .models import Intent, IntentKind, ServiceKind
from .router import MEMORY_PHRASES, SERVICE_KEYWORDS, IntentRouter

__all__ = [
    "Intent",
    "IntentKind",
    "IntentRouter",
    "MEMORY_PHRASES",
    "SERVICE_KEYWORDS",
    "ServiceHandler",
    "ServiceKind",
]
