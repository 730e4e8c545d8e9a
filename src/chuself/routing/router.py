"""Stateless intent classification of user utterances."""

import re
from collections.abc import Collection, Mapping, Sequence

from .models import Intent, ServiceKind

MEMORY_PHRASES = (
    "remember",
    "remind me",
    "what did we talk about",
    "what did we discuss",
    "what did i say",
    "what did i tell you",
    "recall",
    "memory",
    "memories",
)

# Checked in order; the first category with a matching keyword wins
SERVICE_KEYWORDS: Mapping[ServiceKind, Sequence[str]] = {
    ServiceKind.GMAIL: ("email", "emails", "inbox", "mail", "message", "messages"),
    ServiceKind.CALENDAR: ("schedule", "meeting", "meetings", "event", "events", "appointment", "appointments"),
    ServiceKind.DRIVE: ("file", "files", "document", "documents", "upload", "folder", "folders"),
}


class IntentRouter:
    """Classifies utterances as memory queries, service requests or chat.

    Memory-query phrases take precedence over service keywords. Service
    keywords are only consulted for integrations that are connected.
    """

    def __init__(
        self,
        memory_phrases: Sequence[str] = MEMORY_PHRASES,
        service_keywords: Mapping[ServiceKind, Sequence[str]] = SERVICE_KEYWORDS,
    ):
        self._memory_phrases = tuple(phrase.lower() for phrase in memory_phrases)
        self._service_patterns = {
            service: re.compile(
                r"\b(" + "|".join(re.escape(k.lower()) for k in keywords) + r")\b"
            )
            for service, keywords in service_keywords.items()
        }

    def is_memory_query(self, text: str) -> bool:
        lower = text.lower()
        return any(phrase in lower for phrase in self._memory_phrases)

    def match_service(
        self,
        text: str,
        connected: Collection[ServiceKind],
    ) -> ServiceKind | None:
        lower = text.lower()
        for service, pattern in self._service_patterns.items():
            if service in connected and pattern.search(lower):
                return service
        return None

    def classify(
        self,
        text: str,
        connected: Collection[ServiceKind] = frozenset(),
    ) -> Intent:
        """Classify an utterance.

        Args:
            text: The user's message
            connected: Integrations currently available

        Returns:
            The routing decision
        """
        if self.is_memory_query(text):
            return Intent.memory_query()

        service = self.match_service(text, connected)
        if service is not None:
            return Intent.service_request(service)

        return Intent.chat()
