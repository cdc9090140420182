"""Tests for batch flashcard generation."""

import json

import pytest

from conftest import VALID_FLASHCARD, ScriptedTransport, ok_response
from openrouter_gateway.core.exceptions import ConfigurationError, ResponseFormatError
from openrouter_gateway.services import FlashcardGenerationService, OpenRouterService
from openrouter_gateway.services.flashcard_generation_service import BATCH_INSTRUCTIONS

POLISH_TEXT = "Fotosynteza jest procesem, w którym rośliny przekształcają światło w energię chemiczną."
ENGLISH_TEXT = "Photosynthesis is the process that plants use to turn light into chemical energy."


def make_generator(gateway_config, *outcomes):
    transport = ScriptedTransport(*outcomes)
    return FlashcardGenerationService(OpenRouterService(gateway_config, transport=transport)), transport


def card(i: int) -> dict:
    return {**VALID_FLASHCARD, "front": f"Question {i}?"}


class TestFlashcardGenerationService:
    """Test batch generation, language handling and lenient parsing."""

    async def test_generates_batch(self, gateway_config) -> None:
        generator, transport = make_generator(gateway_config, ok_response(json.dumps([card(i) for i in range(5)])))

        batch = await generator.generate_flashcards(ENGLISH_TEXT)

        assert len(batch.flashcards) == 5
        assert batch.model == "openai/gpt-4"
        body = transport.payloads[0]
        assert body["messages"][0]["content"] == BATCH_INSTRUCTIONS["en"]
        assert body["response_format"]["json_schema"]["schema"]["type"] == "array"

    async def test_detects_polish(self, gateway_config) -> None:
        generator, transport = make_generator(gateway_config, ok_response(json.dumps([card(1)])))

        await generator.generate_flashcards(POLISH_TEXT)

        assert transport.payloads[0]["messages"][0]["content"] == BATCH_INSTRUCTIONS["pl"]

    async def test_explicit_language_wins(self, gateway_config) -> None:
        generator, transport = make_generator(gateway_config, ok_response(json.dumps([card(1)])))

        await generator.generate_flashcards(ENGLISH_TEXT, language="pl")

        assert transport.payloads[0]["messages"][0]["content"] == BATCH_INSTRUCTIONS["pl"]

    @pytest.mark.parametrize(
        "content",
        [
            f"Here are your flashcards:\n```json\n{json.dumps([VALID_FLASHCARD])}\n```",
            json.dumps({"flashcards": [VALID_FLASHCARD]}),
            json.dumps(VALID_FLASHCARD),
        ],
    )
    async def test_lenient_reply_shapes(self, gateway_config, content) -> None:
        generator, _ = make_generator(gateway_config, ok_response(content))

        batch = await generator.generate_flashcards(ENGLISH_TEXT)

        assert [c.front for c in batch.flashcards] == [VALID_FLASHCARD["front"]]

    async def test_invalid_card_fails_batch(self, gateway_config) -> None:
        generator, _ = make_generator(gateway_config, ok_response(json.dumps([card(1), {"front": "only"}])))

        with pytest.raises(ResponseFormatError):
            await generator.generate_flashcards(ENGLISH_TEXT)

    async def test_empty_list_fails(self, gateway_config) -> None:
        generator, _ = make_generator(gateway_config, ok_response("[]"))

        with pytest.raises(ResponseFormatError):
            await generator.generate_flashcards(ENGLISH_TEXT)

    async def test_blank_text(self, gateway_config) -> None:
        generator, transport = make_generator(gateway_config, ok_response("unused"))

        with pytest.raises(ConfigurationError):
            await generator.generate_flashcards("  ")

        assert transport.call_count == 0

    async def test_works_with_mock_client(self, gateway_config) -> None:
        generator = FlashcardGenerationService(OpenRouterService(gateway_config, use_mock=True))

        batch = await generator.generate_flashcards(ENGLISH_TEXT)

        assert len(batch.flashcards) == 5
        assert batch.model == "mock/mock-model-for-development"
