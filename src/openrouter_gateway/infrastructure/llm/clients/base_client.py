"""Base completion client interface."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from ....models.schemas import CompletionResponse, RequestPayload


class BaseCompletionClient(ABC):
    """Abstract base class for chat completion transports."""

    def __init__(self, name: str):
        """Initialize the completion client.

        Args:
            name: Human-readable name for this client
        """
        self.name = name

    @abstractmethod
    async def complete(self, payload: RequestPayload, cancel_event: asyncio.Event | None = None) -> CompletionResponse:
        """Execute a completion request.

        Args:
            payload: Validated request payload
            cancel_event: Optional caller-owned event that aborts the operation when set

        Returns:
            Structurally validated completion response

        Raises:
            GatewayError: Classified failure
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the completion service is reachable."""
        pass

    async def close(self) -> None:
        """Release network resources."""
        return None
