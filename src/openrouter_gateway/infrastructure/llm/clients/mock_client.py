"""Mock completion client for offline development and tests."""

from __future__ import annotations

import asyncio
import json
import random
import time
from collections import deque
from typing import Any

from pydantic import BaseModel

from ....core.exceptions import NetworkError, RequestCancelledError
from ....domain.enums import ChatRole
from ....models.schemas import CompletionResponse, RequestPayload
from ..response_parser import validate_completion
from .base_client import BaseCompletionClient

MOCK_BATCH_SIZE = 5


class MockConfig(BaseModel):
    """Configuration for Mock client."""

    default_model: str = "mock/mock-model-for-development"
    simulate_delay: bool = False
    min_delay_ms: int = 100
    max_delay_ms: int = 1500
    failure_rate: float = 0.0  # 0.0 = no failures, 1.0 = always fail
    max_recorded_requests: int = 50


def mock_flashcard(index: int, word_count: int) -> dict[str, Any]:
    """Deterministic flashcard body derived from the source text size."""
    return {
        "front": f"Mock Flashcard {index} Front (from text with {word_count} words)",
        "back": f"Mock Answer {index} with details based on the provided content.",
        "hint": f"Mock hint {index}",
        "difficulty": "medium",
        "tags": ["mock"],
    }


class MockCompletionClient(BaseCompletionClient):
    """Answers completions locally; flashcard schemas get schema-shaped content."""

    def __init__(self, config: MockConfig | None = None):
        super().__init__("Mock")
        self.config = config or MockConfig()
        self.requests: deque[RequestPayload] = deque(maxlen=self.config.max_recorded_requests)
        self.request_count = 0

    async def complete(self, payload: RequestPayload, cancel_event: asyncio.Event | None = None) -> CompletionResponse:
        """Return a canned completion for ``payload``.

        Raises:
            NetworkError: If a failure is simulated
            RequestCancelledError: If ``cancel_event`` is set
        """
        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelledError("Request cancelled by caller")
        self.requests.append(payload)
        self.request_count += 1
        await self._simulate_delay()

        if self.config.failure_rate > 0 and random.random() < self.config.failure_rate:
            raise NetworkError("Mock client simulated failure")

        return validate_completion(
            {
                "id": f"mock-{int(time.time() * 1000)}-{self.request_count}",
                "model": self.config.default_model,
                "choices": [
                    {
                        "message": {"role": ChatRole.ASSISTANT.value, "content": self._generate_content(payload)},
                        "index": 0,
                        "finish_reason": "stop",
                    }
                ],
            }
        )

    def _generate_content(self, payload: RequestPayload) -> str:
        user_messages = [m.content for m in payload.messages if m.role is ChatRole.USER]
        last_user = user_messages[-1] if user_messages else ""
        word_count = len(last_user.split())

        if payload.response_format is None:
            return f"Mock response to: {last_user}"

        schema = payload.response_format.json_schema.schema_definition
        if schema.get("type") == "array":
            return json.dumps([mock_flashcard(i, word_count) for i in range(1, MOCK_BATCH_SIZE + 1)])
        return json.dumps(mock_flashcard(1, word_count))

    async def _simulate_delay(self) -> None:
        if self.config.simulate_delay:
            delay_ms = random.randint(self.config.min_delay_ms, self.config.max_delay_ms)
            await asyncio.sleep(delay_ms / 1000.0)

    async def health_check(self) -> bool:
        """Mock service is always available."""
        return True

    def set_failure_rate(self, rate: float) -> None:
        """Set the failure simulation rate, clamped to [0, 1]."""
        self.config.failure_rate = max(0.0, min(1.0, rate))
