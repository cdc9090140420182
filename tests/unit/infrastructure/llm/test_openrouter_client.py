"""Tests for the OpenRouter HTTP client using a scripted transport."""

import asyncio
import json
from unittest.mock import AsyncMock

import httpx
import pytest

from conftest import VALID_FLASHCARD, ScriptedTransport, ok_response
from openrouter_gateway.core.exceptions import (
    AuthenticationError,
    CompletionError,
    NetworkError,
    RequestCancelledError,
    RequestTimeoutError,
    ResponseFormatError,
)
from openrouter_gateway.domain.enums import ChatRole
from openrouter_gateway.infrastructure.llm import OpenRouterClient, build_request_payload
from openrouter_gateway.models import ChatMessage


@pytest.fixture
def payload():
    return build_request_payload(
        [ChatMessage(role=ChatRole.USER, content="hello")],
        None,
        "openai/gpt-4",
        {"temperature": 0.7},
    )


class TestOpenRouterClient:
    """Test request sending, classification and retries."""

    async def test_successful_completion(self, gateway_config, payload) -> None:
        transport = ScriptedTransport(ok_response("Hi!"))
        client = OpenRouterClient(gateway_config, transport=transport)

        response = await client.complete(payload)

        assert response.choices[0].message.content == "Hi!"
        assert transport.call_count == 1
        await client.close()

    async def test_request_shape_and_headers(self, gateway_config, payload) -> None:
        transport = ScriptedTransport(ok_response("Hi!"))
        client = OpenRouterClient(gateway_config, transport=transport)

        await client.complete(payload)

        request = transport.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://openrouter.ai/api/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer test-key"
        assert request.headers["HTTP-Referer"] == "https://example.test"
        assert request.headers["Content-Type"] == "application/json"
        assert transport.payloads[0] == {
            "messages": [{"role": "user", "content": "hello"}],
            "model": "openai/gpt-4",
            "temperature": 0.7,
        }

    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_failure_is_not_retried(self, gateway_config, payload, no_backoff, status: int) -> None:
        transport = ScriptedTransport(httpx.Response(status, json={"error": "invalid key"}))
        client = OpenRouterClient(gateway_config, transport=transport)

        with pytest.raises(AuthenticationError):
            await client.complete(payload)

        assert transport.call_count == 1

    async def test_rate_limit_is_not_retried(self, gateway_config, payload, no_backoff) -> None:
        transport = ScriptedTransport(httpx.Response(429, text="slow down"))
        client = OpenRouterClient(gateway_config, transport=transport)

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(payload)

        assert exc_info.value.status_code == 429
        assert transport.call_count == 1

    async def test_server_errors_exhaust_retries(self, gateway_config, payload, no_backoff: AsyncMock) -> None:
        transport = ScriptedTransport(httpx.Response(500, text="boom"))
        client = OpenRouterClient(gateway_config, transport=transport)

        with pytest.raises(NetworkError, match="Server error"):
            await client.complete(payload)

        assert transport.call_count == 4
        assert [c.args[0] for c in no_backoff.await_args_list] == [2.0, 4.0, 8.0]

    async def test_recovers_after_server_error(self, gateway_config, payload, no_backoff) -> None:
        transport = ScriptedTransport(httpx.Response(503), ok_response("finally"))
        client = OpenRouterClient(gateway_config, transport=transport)

        response = await client.complete(payload)

        assert response.choices[0].message.content == "finally"
        assert transport.call_count == 2

    async def test_transport_timeout_is_retried(self, gateway_config, payload, no_backoff) -> None:
        transport = ScriptedTransport(httpx.ReadTimeout("timed out"), ok_response("ok"))
        client = OpenRouterClient(gateway_config, transport=transport)

        await client.complete(payload)

        assert transport.call_count == 2

    async def test_persistent_timeout(self, gateway_config, payload, no_backoff) -> None:
        transport = ScriptedTransport(httpx.ConnectTimeout("timed out"))
        client = OpenRouterClient(gateway_config.model_copy(update={"retry_count": 1}), transport=transport)

        with pytest.raises(RequestTimeoutError):
            await client.complete(payload)

        assert transport.call_count == 2

    async def test_connection_error_is_retried(self, gateway_config, payload, no_backoff) -> None:
        transport = ScriptedTransport(httpx.ConnectError("refused"), ok_response("ok"))
        client = OpenRouterClient(gateway_config, transport=transport)

        await client.complete(payload)

        assert transport.call_count == 2

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, json={"unexpected": True}),
            httpx.Response(200, json={"id": "x", "model": "m", "choices": []}),
            httpx.Response(200, text="<html>not json</html>"),
        ],
    )
    async def test_malformed_body_is_not_retried(self, gateway_config, payload, no_backoff, response) -> None:
        transport = ScriptedTransport(response)
        client = OpenRouterClient(gateway_config, transport=transport)

        with pytest.raises(ResponseFormatError):
            await client.complete(payload)

        assert transport.call_count == 1

    async def test_structured_content_passes_through(self, gateway_config, payload) -> None:
        transport = ScriptedTransport(ok_response(json.dumps(VALID_FLASHCARD)))
        client = OpenRouterClient(gateway_config, transport=transport)

        response = await client.complete(payload)

        assert json.loads(response.choices[0].message.content) == VALID_FLASHCARD

    async def test_cancelled_request_never_hits_network(self, gateway_config, payload) -> None:
        transport = ScriptedTransport(ok_response("unused"))
        client = OpenRouterClient(gateway_config, transport=transport)
        cancel_event = asyncio.Event()
        cancel_event.set()

        with pytest.raises(RequestCancelledError):
            await client.complete(payload, cancel_event=cancel_event)

        assert transport.call_count == 0

    async def test_cancel_during_request_discards_reply(self, gateway_config, payload) -> None:
        """Test that a reply received after cancellation is not returned."""
        cancel_event = asyncio.Event()
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            cancel_event.set()
            return ok_response("late reply")

        client = OpenRouterClient(gateway_config, transport=httpx.MockTransport(handler))

        with pytest.raises(RequestCancelledError):
            await client.complete(payload, cancel_event=cancel_event)

        assert len(calls) == 1


class TestHealthCheck:
    """Test the models endpoint probe."""

    async def test_healthy(self, gateway_config) -> None:
        transport = ScriptedTransport(httpx.Response(200, json={"data": []}))
        client = OpenRouterClient(gateway_config, transport=transport)

        assert await client.health_check() is True
        assert str(transport.requests[0].url) == "https://openrouter.ai/api/v1/models"

    async def test_unhealthy_status(self, gateway_config) -> None:
        client = OpenRouterClient(gateway_config, transport=ScriptedTransport(httpx.Response(503)))

        assert await client.health_check() is False

    async def test_unreachable(self, gateway_config) -> None:
        client = OpenRouterClient(gateway_config, transport=ScriptedTransport(httpx.ConnectError("refused")))

        assert await client.health_check() is False
