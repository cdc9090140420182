"""
Pytest configuration and shared fixtures for gateway tests.

Provides a scripted httpx transport standing in for the completion endpoint,
canned completion bodies and a patched backoff wait so retry tests run
instantly.
"""

from __future__ import annotations

import json
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from openrouter_gateway.core.config import GatewayConfig

VALID_FLASHCARD: dict[str, Any] = {
    "front": "What does photosynthesis convert light into?",
    "back": "Chemical energy stored in glucose.",
    "hint": "Think about what plants store.",
    "difficulty": "medium",
    "tags": ["biology", "plants"],
}


def completion_body(content: Any, model: str = "openai/gpt-4", response_id: str = "gen-123") -> dict[str, Any]:
    """Build a completion response body as the endpoint returns it."""
    return {
        "id": response_id,
        "model": model,
        "choices": [{"message": {"role": "assistant", "content": content}, "index": 0, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
    }


def ok_response(content: Any, **kwargs: Any) -> httpx.Response:
    return httpx.Response(200, json=completion_body(content, **kwargs))


class ScriptedTransport(httpx.MockTransport):
    """Replays outcomes in order (the last one repeats) and records every request."""

    def __init__(self, *outcomes: httpx.Response | Exception) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes[min(len(self.requests), len(self.outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome.status_code, headers=outcome.headers, content=outcome.content)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: integration test")
    config.addinivalue_line("markers", "slow: slow running test")


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Gateway configuration with a test key and default retry policy."""
    return GatewayConfig(api_key="test-key", site_url="https://example.test")


@pytest.fixture
def no_backoff() -> Generator[AsyncMock, None, None]:
    """Replace the backoff wait so retries are instant; records requested delays in seconds."""
    with patch("openrouter_gateway.infrastructure.llm.resilience.retry._wait", new_callable=AsyncMock) as wait:
        yield wait
