"""Domain enums for chat roles, flashcard difficulty and error classification."""

from enum import Enum


class ChatRole(str, Enum):
    """Roles a chat message can carry."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Difficulty(str, Enum):
    """Difficulty rating of a generated flashcard."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ErrorKind(str, Enum):
    """Closed taxonomy of gateway failures."""

    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    NETWORK = "network"
    RESPONSE_FORMAT = "response_format"
    COMPLETION = "completion"
    GATEWAY = "gateway"
    CANCELLED = "cancelled"

    @property
    def retryable(self) -> bool:
        """Only transport-level failures are worth another attempt."""
        return self is ErrorKind.NETWORK
