"""Tests for request payload assembly."""

import pytest

from openrouter_gateway.core.exceptions import ConfigurationError
from openrouter_gateway.domain.enums import ChatRole
from openrouter_gateway.infrastructure.llm import build_request_payload, create_json_schema, normalize_model_name
from openrouter_gateway.models import FLASHCARD_PROPOSAL_SCHEMA, ChatMessage, ModelParameters

MESSAGES = [
    ChatMessage(role=ChatRole.SYSTEM, content="You are helpful."),
    ChatMessage(role=ChatRole.USER, content="hello"),
]


class TestNormalizeModelName:
    """Test provider prefixing."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("gpt-4", "openai/gpt-4"),
            ("anthropic/claude-3-haiku", "anthropic/claude-3-haiku"),
            ("  gpt-4o  ", "openai/gpt-4o"),
        ],
    )
    def test_normalize(self, name: str, expected: str) -> None:
        assert normalize_model_name(name) == expected

    def test_custom_provider(self) -> None:
        assert normalize_model_name("llama-3", "meta-llama") == "meta-llama/llama-3"


class TestBuildRequestPayload:
    """Test payload construction and validation."""

    def test_body_shape(self) -> None:
        response_format = create_json_schema("FlashcardProposal", FLASHCARD_PROPOSAL_SCHEMA)

        payload = build_request_payload(
            MESSAGES,
            response_format,
            "openai/gpt-4",
            ModelParameters(temperature=0.7, max_tokens=2048),
        )
        body = payload.to_request_body()

        assert body["model"] == "openai/gpt-4"
        assert body["messages"] == [
            {"role": "system", "content": "You are helpful."},
            {"role": "user", "content": "hello"},
        ]
        assert body["temperature"] == 0.7
        assert body["max_tokens"] == 2048
        assert body["response_format"] == {
            "type": "json_schema",
            "json_schema": {"name": "FlashcardProposal", "strict": True, "schema": FLASHCARD_PROPOSAL_SCHEMA},
        }

    def test_omits_response_format_when_absent(self) -> None:
        body = build_request_payload(MESSAGES, None, "openai/gpt-4").to_request_body()

        assert "response_format" not in body

    def test_accepts_plain_mapping_params(self) -> None:
        payload = build_request_payload(MESSAGES, None, "openai/gpt-4", {"seed": 7, "top_p": None})

        assert payload.model_params == {"seed": 7}

    def test_bare_model_name_gets_provider(self) -> None:
        assert build_request_payload(MESSAGES, None, "gpt-4").model == "openai/gpt-4"

    def test_empty_messages_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid request payload"):
            build_request_payload([], None, "openai/gpt-4")

    @pytest.mark.parametrize("model", ["openai/", "/gpt-4", "a/b/c", ""])
    def test_malformed_model_rejected(self, model: str) -> None:
        with pytest.raises(ConfigurationError):
            build_request_payload(MESSAGES, None, model)

    def test_non_scalar_param_rejected(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            build_request_payload(MESSAGES, None, "openai/gpt-4", {"stop": ["\n"]})

        assert exc_info.value.retryable is False
