"""Client-side gateway to the OpenRouter completion API.

Turns source text into validated flashcard proposals and carries ad-hoc
chat sessions, with response caching and bounded retries.
"""

from .core.config import GatewayConfig, LoggingConfig, Settings, setup_logging
from .core.exceptions import (
    AuthenticationError,
    CompletionError,
    ConfigurationError,
    GatewayError,
    NetworkError,
    RequestCancelledError,
    RequestTimeoutError,
    ResponseFormatError,
)
from .domain.enums import ChatRole, Difficulty, ErrorKind
from .models import (
    ChatMessage,
    FlashcardBatch,
    FlashcardProposal,
    GatewayResult,
    ModelParameters,
    RequestPayload,
    ResponseFormat,
    ResponsePayload,
)
from .services import FlashcardGenerationService, OpenRouterService

__version__ = "1.0.0"

__all__ = [
    "OpenRouterService",
    "FlashcardGenerationService",
    "GatewayConfig",
    "LoggingConfig",
    "Settings",
    "setup_logging",
    "ChatMessage",
    "ChatRole",
    "Difficulty",
    "ErrorKind",
    "FlashcardProposal",
    "FlashcardBatch",
    "GatewayResult",
    "ModelParameters",
    "RequestPayload",
    "ResponseFormat",
    "ResponsePayload",
    "GatewayError",
    "ConfigurationError",
    "AuthenticationError",
    "NetworkError",
    "RequestTimeoutError",
    "ResponseFormatError",
    "CompletionError",
    "RequestCancelledError",
]
