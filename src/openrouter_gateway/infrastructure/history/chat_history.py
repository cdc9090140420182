"""Chat history storage and token-budget truncation."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import structlog

from ...models.schemas import ChatMessage

logger = structlog.get_logger(__name__)

DEFAULT_TOKENS_PER_WORD = 4


def estimate_tokens(text: str, tokens_per_word: int = DEFAULT_TOKENS_PER_WORD) -> int:
    """Crude word-count estimate; an empty message still counts as one word."""
    return max(1, len(text.split())) * tokens_per_word


def truncate_chat_history(
    history: Sequence[ChatMessage],
    max_tokens: int,
    tokens_per_word: int = DEFAULT_TOKENS_PER_WORD,
) -> list[ChatMessage]:
    """Keep the most recent messages that fit into ``max_tokens``.

    Walks from newest to oldest and stops at the first message that would
    exceed the budget, so the result is always a suffix of ``history`` in
    chronological order. The newest message is always kept, even when it
    alone exceeds the budget, so the result is empty only for empty input.
    """
    if not history:
        return []

    kept: list[ChatMessage] = []
    used = 0
    for message in reversed(history):
        cost = estimate_tokens(message.content, tokens_per_word)
        if kept and used + cost > max_tokens:
            break
        kept.append(message)
        used += cost

    kept.reverse()
    logger.debug("Truncated chat history", before=len(history), after=len(kept), estimated_tokens=used)
    return kept


@runtime_checkable
class ChatHistoryStore(Protocol):
    """Conversation state owned by one gateway session."""

    def snapshot(self) -> list[ChatMessage]: ...

    async def append(self, *messages: ChatMessage) -> None: ...

    async def clear(self) -> None: ...


class InMemoryChatHistory:
    """Process-local history; appends are serialized so an exchange lands as one unit."""

    def __init__(self, messages: Sequence[ChatMessage] | None = None) -> None:
        self._messages: list[ChatMessage] = list(messages or [])
        self._lock = asyncio.Lock()

    def snapshot(self) -> list[ChatMessage]:
        return list(self._messages)

    async def append(self, *messages: ChatMessage) -> None:
        async with self._lock:
            self._messages.extend(messages)

    async def clear(self) -> None:
        async with self._lock:
            self._messages.clear()
        logger.debug("Chat history cleared")

    def __len__(self) -> int:
        return len(self._messages)
