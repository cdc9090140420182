"""Factory for creating completion clients based on configuration."""

from __future__ import annotations

import httpx
import structlog

from ...core.config.gateway_settings import GatewayConfig
from .clients.base_client import BaseCompletionClient
from .clients.mock_client import MockCompletionClient, MockConfig
from .clients.openrouter_client import OpenRouterClient

logger = structlog.get_logger(__name__)


def create_client(
    config: GatewayConfig,
    use_mock: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> BaseCompletionClient:
    """Create the completion client for a gateway session.

    Args:
        config: Validated gateway configuration
        use_mock: Answer locally instead of calling the endpoint
        transport: Optional httpx transport for the HTTP client

    Returns:
        Configured completion client
    """
    if use_mock:
        logger.info("Using mock completion client")
        return MockCompletionClient(MockConfig())
    return OpenRouterClient(config, transport=transport)
