"""Seam between the router and external service integrations."""

from abc import ABC, abstractmethod

from .models import ServiceKind


class ServiceHandler(ABC):
    """Performs a delegated external-service request.

    Implementations own their HTTP calls and return formatted text that is
    treated like a provider reply.
    """

    @abstractmethod
    async def handle(self, service: ServiceKind, text: str) -> str:
        """Handle a request.

        Args:
            service: Integration selected by the router
            text: The user's utterance

        Returns:
            Reply text shown to the user
        """
