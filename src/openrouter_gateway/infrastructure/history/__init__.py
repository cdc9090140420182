"""Chat history management."""

from .chat_history import ChatHistoryStore, InMemoryChatHistory, estimate_tokens, truncate_chat_history

__all__ = ["ChatHistoryStore", "InMemoryChatHistory", "estimate_tokens", "truncate_chat_history"]
