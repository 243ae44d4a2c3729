"""In-process cache backend."""

from __future__ import annotations

import time
from typing import Callable

from eurofx.cache.base_backend import CacheStore, validate_ttl


class MemoryCacheStore(CacheStore):
    """Dictionary-backed store; entries are evicted lazily on access."""

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + validate_ttl(ttl_seconds))

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def close(self) -> None:
        self._entries.clear()


__all__ = ["MemoryCacheStore"]
