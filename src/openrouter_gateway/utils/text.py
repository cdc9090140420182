"""Text helpers for prompts and user input."""

import re
from collections.abc import Sequence
from typing import Literal

from ..domain.enums import ChatRole
from ..models.schemas import ChatMessage

SystemMessageKind = Literal["general", "json", "coding", "creative"]

_SCRIPT_TAG_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_PROTOCOL_RE = re.compile(r"javascript:", re.IGNORECASE)

_SYSTEM_MESSAGES: dict[str, str] = {
    "general": "You are a helpful assistant providing accurate and concise information.",
    "json": (
        "You are a helpful assistant that always responds in valid JSON format. "
        "You keep your responses structured according to the schema provided."
    ),
    "coding": (
        "You are a coding assistant that provides clear, efficient, and well-documented code examples with explanations. "
        "You follow best practices and prioritize readability."
    ),
    "creative": (
        "You are a creative assistant that provides imaginative, original, and engaging content. "
        "You think outside the box and offer unique perspectives."
    ),
}


def sanitize_input(text: str | None) -> str:
    """Strip script blocks and ``javascript:`` URLs, then trim whitespace."""
    if not text:
        return ""
    text = _SCRIPT_TAG_RE.sub("", text)
    text = _JS_PROTOCOL_RE.sub("", text)
    return text.strip()


def create_system_message(kind: SystemMessageKind | str) -> str:
    """Return a canned system prompt for a common use case."""
    return _SYSTEM_MESSAGES.get(kind, "You are a helpful assistant.")


def combine_messages(messages: Sequence[ChatMessage], prefix: str = "Previous conversation: ") -> ChatMessage:
    """Fold a conversation into a single system message."""
    combined = "\n\n".join(f"{msg.role.value}: {msg.content}" for msg in messages)
    return ChatMessage(role=ChatRole.SYSTEM, content=f"{prefix}{combined}")


_POLISH_CHARS = ("ą", "ć", "ę", "ł", "ń", "ó", "ś", "ź", "ż")
_POLISH_WORDS = ("jest", "nie", "to", "się", "oraz", "dla", "przez", "jako", "były")
_ENGLISH_WORDS = ("the", "is", "are", "and", "for", "with", "this", "that", "have")


def detect_language(text: str, sample_size: int = 500) -> str:
    """Guess ``"pl"`` or ``"en"`` from diacritics and common words in the first ``sample_size`` chars."""
    sample = f" {text[:sample_size].lower()} "
    polish_score = sum(2 for char in _POLISH_CHARS if char in sample)
    polish_score += sum(1 for word in _POLISH_WORDS if f" {word} " in sample)
    english_score = sum(1 for word in _ENGLISH_WORDS if f" {word} " in sample)
    return "pl" if polish_score > english_score else "en"
