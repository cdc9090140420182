"""Response caching."""

from .response_cache import CacheItem, InMemoryResponseCache, ResponseCache, make_cache_key

__all__ = ["CacheItem", "InMemoryResponseCache", "ResponseCache", "make_cache_key"]
