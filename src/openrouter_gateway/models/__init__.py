"""Data models for requests, responses and flashcards."""

from .flashcard import (
    FLASHCARD_BATCH_SCHEMA,
    FLASHCARD_PROPOSAL_SCHEMA,
    FlashcardBatch,
    FlashcardProposal,
)
from .result import GatewayResult
from .schemas import (
    ChatMessage,
    CompletionChoice,
    CompletionMessage,
    CompletionResponse,
    CompletionUsage,
    JsonSchemaSpec,
    ModelParameters,
    RequestPayload,
    ResponseFormat,
    ResponsePayload,
)

__all__ = [
    "ChatMessage",
    "ModelParameters",
    "JsonSchemaSpec",
    "ResponseFormat",
    "RequestPayload",
    "CompletionMessage",
    "CompletionChoice",
    "CompletionUsage",
    "CompletionResponse",
    "ResponsePayload",
    "FlashcardProposal",
    "FlashcardBatch",
    "FLASHCARD_PROPOSAL_SCHEMA",
    "FLASHCARD_BATCH_SCHEMA",
    "GatewayResult",
]
