"""In-process model cache keyed by model kind and identity."""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Awaitable, Callable, Hashable
import logging
from threading import Lock
import time
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300
DEFAULT_MAX_ENTRIES = 1000

CacheKey = tuple[str, Hashable]


def model_kind(kind: type | str) -> str:
    return kind if isinstance(kind, str) else kind.__name__


class ModelCache:
    """
    Read-through cache for materialized models.

    Entries expire after ``default_ttl`` seconds; once ``max_entries`` is reached
    the oldest entry is dropped. All mutations happen under a single lock.
    """

    def __init__(
        self,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self.enabled = enabled
        self._clock = clock
        self._entries: OrderedDict[CacheKey, tuple[float, Any]] = OrderedDict()
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, kind: type | str, key: Hashable) -> Any | None:
        if not self.enabled:
            return None
        cache_key = (model_kind(kind), key)
        with self._lock:
            entry = self._entries.get(cache_key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[cache_key]
                logger.debug("Cache entry %s expired", cache_key)
                return None
            return value

    def set(self, kind: type | str, key: Hashable, value: Any, ttl: int | None = None) -> None:
        if not self.enabled:
            return
        cache_key = (model_kind(kind), key)
        expires_at = self._clock() + (ttl if ttl is not None else self.default_ttl)
        with self._lock:
            self._entries.pop(cache_key, None)
            while len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache full, evicted %s", evicted)
            self._entries[cache_key] = (expires_at, value)

    def invalidate(self, kind: type | str, key: Hashable) -> bool:
        cache_key = (model_kind(kind), key)
        with self._lock:
            removed = self._entries.pop(cache_key, None) is not None
        if removed:
            logger.debug("Cache entry %s invalidated", cache_key)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    async def get_or_load(
        self,
        kind: type | str,
        key: Hashable,
        loader: Callable[[], Awaitable[Any | None]],
        ttl: int | None = None,
    ) -> Any | None:
        """Return the cached value or await ``loader`` and cache a non-None result."""
        value = self.get(kind, key)
        if value is not None:
            return value
        value = await loader()
        if value is not None:
            self.set(kind, key, value, ttl=ttl)
        return value
