"""OpenRouter HTTP completion client."""

from __future__ import annotations

import asyncio

import httpx
import structlog

from ....core.config.gateway_settings import GatewayConfig
from ....core.exceptions import ResponseFormatError
from ....models.schemas import CompletionResponse, RequestPayload
from ..error_classifier import classify_status
from ..resilience.retry import RetryableClient, RetryConfig
from ..response_parser import validate_completion
from .base_client import BaseCompletionClient

logger = structlog.get_logger(__name__)


class OpenRouterClient(BaseCompletionClient, RetryableClient):
    """Completion client for ``POST <endpoint>`` with bounded retries."""

    def __init__(self, config: GatewayConfig, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize OpenRouter client.

        Args:
            config: Validated gateway configuration
            transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests
        """
        BaseCompletionClient.__init__(self, "OpenRouter")
        RetryableClient.__init__(
            self,
            RetryConfig(
                retry_count=config.retry_count,
                base_delay_ms=config.backoff_base_ms,
                max_delay_ms=config.backoff_max_ms,
                jitter=config.backoff_jitter,
            ),
        )
        self.config = config
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.request_timeout),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {config.api_key.get_secret_value()}",
                "HTTP-Referer": config.site_url,
            },
            transport=transport,
        )

    async def complete(self, payload: RequestPayload, cancel_event: asyncio.Event | None = None) -> CompletionResponse:
        """Send the payload, retrying transport and server failures."""
        return await self.execute_with_retry(self._send, payload, cancel_event=cancel_event)

    async def _send(self, payload: RequestPayload) -> CompletionResponse:
        """Make a single API call bounded by the request timeout.

        Raises:
            AuthenticationError: On 401/403
            NetworkError: On 5xx, timeouts and transport failures
            CompletionError: On other non-2xx statuses
            ResponseFormatError: If the body is not a valid completion
        """
        logger.debug("Sending request to OpenRouter API", endpoint=self.config.api_endpoint, model=payload.model)

        async with asyncio.timeout(self.config.request_timeout):
            response = await self._client.post(self.config.api_endpoint, json=payload.to_request_body())

        error = classify_status(response.status_code, response.reason_phrase, response.text)
        if error is not None:
            raise error

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseFormatError(f"Response body is not JSON: {e}", original_error=e) from e

        return validate_completion(data)

    async def health_check(self) -> bool:
        """Check if the OpenRouter API is available."""
        try:
            response = await self._client.get(f"{self.config.base_url}/models")
        except httpx.HTTPError as e:
            logger.warning("Health check failed", error=str(e))
            return False
        return response.status_code == 200

    async def close(self) -> None:
        """Close HTTP client connections."""
        await self._client.aclose()
