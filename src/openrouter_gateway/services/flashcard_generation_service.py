"""Batch flashcard generation on top of the gateway session."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from ..core.exceptions import ConfigurationError, ResponseFormatError
from ..domain.enums import ChatRole
from ..infrastructure.llm.payload_builder import create_json_schema
from ..infrastructure.llm.response_parser import parse_flashcard
from ..models.flashcard import FLASHCARD_BATCH_SCHEMA, FlashcardBatch, FlashcardProposal
from ..models.schemas import ChatMessage, ResponsePayload
from ..utils.text import detect_language
from .openrouter_service import FLASHCARD_SCHEMA_NAME, OpenRouterService

logger = structlog.get_logger(__name__)

BATCH_SIZE = 5

BATCH_INSTRUCTIONS: dict[str, str] = {
    "en": (
        f"Your task is to generate {BATCH_SIZE} flashcards in VALID JSON format. "
        "Always return ONLY a JSON ARRAY of flashcard objects with no extra text before or after. "
        "Each object must include these fields: 'front' (question), 'back' (answer), 'hint' (helpful tip), "
        "'difficulty' (one of: 'easy', 'medium', 'hard'), and 'tags' (array of strings). "
        f"Generate {BATCH_SIZE} different flashcards covering different aspects of the text. "
        "DO NOT include any explanation text, markdown, or code blocks before or after the JSON array. "
        "IMPORTANT: The question, answer, and hint must be in ENGLISH."
    ),
    "pl": (
        f"Twoim zadaniem jest wygenerowanie {BATCH_SIZE} fiszek w formacie JSON. "
        "Zwróć WYŁĄCZNIE tablicę JSON obiektów bez żadnego dodatkowego tekstu przed lub po. "
        "Każdy obiekt musi zawierać pola: 'front' (pytanie), 'back' (odpowiedź), 'hint' (podpowiedź), "
        "'difficulty' (jedna z wartości: 'easy', 'medium', 'hard') oraz 'tags' (tablica stringów). "
        f"Wygeneruj {BATCH_SIZE} różnych fiszek obejmujących różne aspekty tekstu. "
        "NIE DODAWAJ żadnych wyjaśnień, znaczników markdown ani bloków kodu przed lub po tablicy JSON. "
        "WAŻNE: Pytanie, odpowiedź i podpowiedź muszą być w języku POLSKIM."
    ),
}


def _collect_cards(message: Any) -> list[FlashcardProposal]:
    # A lone object or a {"flashcards": [...]} wrapper are accepted as well.
    if isinstance(message, dict):
        items = message.get("flashcards", [message])
    else:
        items = message
    if not isinstance(items, list) or not items:
        raise ResponseFormatError("Expected a non-empty list of flashcards")
    return [parse_flashcard(item) for item in items]


class FlashcardGenerationService:
    """Generates several flashcards per source text in the text's language."""

    def __init__(self, gateway: OpenRouterService):
        self.gateway = gateway

    async def generate_flashcards(
        self,
        text: str,
        language: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> FlashcardBatch:
        """Generate a batch of flashcards from ``text``.

        Args:
            text: Source text
            language: ``"pl"`` or ``"en"``; detected from the text when omitted
            cancel_event: Optional caller-owned cancellation event

        Raises:
            ConfigurationError: If the text is blank
            ResponseFormatError: If no valid flashcard list can be read from the reply
            GatewayError: Any other classified failure of the exchange
        """
        if not text or not text.strip():
            raise ConfigurationError("Source text cannot be empty")

        language = language or detect_language(text)
        instruction = BATCH_INSTRUCTIONS.get(language, BATCH_INSTRUCTIONS["en"])
        logger.debug("Generating flashcard batch", language=language, text_length=len(text))

        def validate(response: ResponsePayload) -> None:
            _collect_cards(response.message)

        response = await self.gateway.complete_structured(
            [
                ChatMessage(role=ChatRole.SYSTEM, content=instruction),
                ChatMessage(role=ChatRole.USER, content=text),
            ],
            create_json_schema(FLASHCARD_SCHEMA_NAME, FLASHCARD_BATCH_SCHEMA),
            cancel_event=cancel_event,
            lenient=True,
            validate=validate,
        )
        cards = _collect_cards(response.message)
        logger.info("Generated flashcard batch", count=len(cards), model=response.model)
        return FlashcardBatch(flashcards=cards, model=response.model)
