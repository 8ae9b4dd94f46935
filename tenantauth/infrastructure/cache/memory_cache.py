"""In-memory reference cache.

Test-only and single-process: nothing here is synchronized, so it is not
safe to share across threads. Expiry is lazy: an expired entry is evicted
when it is next read, so entries that are never read again stay in memory
until their namespace is cleared.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tenantauth.infrastructure.cache.base import BaseCache


@dataclass
class _CacheEntry:
    value: Any
    expires_at: float | None = None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


class MemoryCache(BaseCache):
    """Per-namespace dicts of _CacheEntry with an injectable clock (seconds)."""

    def __init__(
        self,
        default_namespace: str = "tenantauth",
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(default_namespace)
        self._clock = clock
        self._namespaces: dict[str, dict[str, _CacheEntry]] = {}

    def _live_entry(self, namespace: str, key: str) -> _CacheEntry | None:
        entries = self._namespaces.get(namespace)
        if not entries:
            return None
        entry = entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del entries[key]
            return None
        return entry

    async def _contains(self, namespace: str, key: str) -> bool:
        return self._live_entry(namespace, key) is not None

    async def _get(self, namespace: str, key: str) -> Any | None:
        entry = self._live_entry(namespace, key)
        return entry.value if entry is not None else None

    async def _get_many(self, namespace: str, keys: list[str]) -> dict[str, Any]:
        found: dict[str, Any] = {}
        for key in keys:
            entry = self._live_entry(namespace, key)
            if entry is not None:
                found[key] = entry.value
        return found

    async def _put_many(
        self, namespace: str, entries: dict[str, Any], ttl: float | None
    ) -> None:
        expires_at = self._clock() + ttl if self._expires_after(ttl) else None
        bucket = self._namespaces.setdefault(namespace, {})
        for key, value in entries.items():
            bucket[key] = _CacheEntry(value, expires_at)

    async def _remove_many(self, namespace: str, keys: list[str]) -> None:
        bucket = self._namespaces.get(namespace)
        if bucket is None:
            return
        for key in keys:
            bucket.pop(key, None)

    async def _clear(self, namespace: str) -> None:
        self._namespaces.pop(namespace, None)

    def __len__(self) -> int:
        """Total stored entries, expired-but-unread ones included."""
        return sum(len(bucket) for bucket in self._namespaces.values())
