"""Infrastructure layer for the OpenRouter gateway."""

from .cache import CacheItem, InMemoryResponseCache, ResponseCache, make_cache_key
from .history import ChatHistoryStore, InMemoryChatHistory, truncate_chat_history
from .llm import BaseCompletionClient, MockCompletionClient, OpenRouterClient, create_client

__all__ = [
    "CacheItem",
    "InMemoryResponseCache",
    "ResponseCache",
    "make_cache_key",
    "ChatHistoryStore",
    "InMemoryChatHistory",
    "truncate_chat_history",
    "BaseCompletionClient",
    "OpenRouterClient",
    "MockCompletionClient",
    "create_client",
]
