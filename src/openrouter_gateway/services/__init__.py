"""Gateway services."""

from .flashcard_generation_service import FlashcardGenerationService
from .openrouter_service import FLASHCARD_SYSTEM_MESSAGE, OpenRouterService

__all__ = ["OpenRouterService", "FlashcardGenerationService", "FLASHCARD_SYSTEM_MESSAGE"]
