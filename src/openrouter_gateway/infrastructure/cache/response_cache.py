"""TTL-based memoization of completed exchanges."""

from __future__ import annotations

import hashlib
import json
import time
from collections import OrderedDict
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import structlog

from ...models.schemas import ChatMessage, ResponsePayload

logger = structlog.get_logger(__name__)


def make_cache_key(messages: Sequence[ChatMessage], model: str, params: Mapping[str, Any]) -> str:
    """Deterministic key for ``(messages, model, params)``; equal inputs give equal keys."""
    canonical = json.dumps(
        {
            "messages": [m.model_dump(mode="json") for m in messages],
            "model": model,
            "params": dict(params),
        },
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class CacheItem:
    """A cached response and the moment it was stored."""

    response: ResponsePayload
    timestamp: float


@runtime_checkable
class ResponseCache(Protocol):
    """Key-addressed store of successful responses."""

    ttl_seconds: float

    def get(self, key: str) -> CacheItem | None: ...

    def set(self, key: str, response: ResponsePayload) -> None: ...

    def clear(self) -> None: ...


class InMemoryResponseCache:
    """Process-local cache with expiry-on-read and an optional LRU capacity bound."""

    def __init__(
        self,
        ttl_seconds: float = 30 * 60,
        max_entries: int | None = 256,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock or (lambda: time.time())
        self._items: OrderedDict[str, CacheItem] = OrderedDict()

    def is_valid(self, item: CacheItem) -> bool:
        return self._clock() - item.timestamp < self.ttl_seconds

    def get(self, key: str) -> CacheItem | None:
        item = self._items.get(key)
        if item is None:
            logger.debug("cache_miss", key=key[:16])
            return None
        if not self.is_valid(item):
            del self._items[key]
            logger.debug("cache_expired", key=key[:16])
            return None
        self._items.move_to_end(key)
        logger.info("cache_hit", key=key[:16])
        return item

    def set(self, key: str, response: ResponsePayload) -> None:
        self._items[key] = CacheItem(response=response, timestamp=self._clock())
        self._items.move_to_end(key)
        if self.max_entries is not None:
            while len(self._items) > self.max_entries:
                evicted, _ = self._items.popitem(last=False)
                logger.debug("cache_evicted", key=evicted[:16])
        logger.debug("cache_set", key=key[:16], size=len(self._items))

    def clear(self) -> None:
        self._items.clear()
        logger.debug("Response cache cleared")

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items
