"""Shared behaviour of per-tenant cache backends.

BaseCache owns the argument rules every backend must honour: blank
namespace or key and None values are ignored, batch forms filter per
entry, and a missing namespace falls back to the default one only through
the scoped() convenience view. Backends implement the underscored hooks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

from tenantauth.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


class BaseCache(ABC):
    """Namespaced key/value cache with optional per-entry TTL (seconds)."""

    def __init__(self, default_namespace: str) -> None:
        self.default_namespace = default_namespace

    def scoped(self, namespace: str | None = None) -> ScopedCache:
        """Return a view bound to namespace (the default namespace when None)."""
        return ScopedCache(self, namespace or self.default_namespace)

    async def contains(self, namespace: str, key: str) -> bool:
        if _blank(namespace) or _blank(key):
            return False
        return await self._contains(namespace, key)

    async def get(self, namespace: str, key: str) -> Any | None:
        if _blank(namespace) or _blank(key):
            return None
        return await self._get(namespace, key)

    async def get_all(self, namespace: str, keys: Iterable[str]) -> dict[str, Any]:
        """Return the present, unexpired entries among keys; others are omitted."""
        if _blank(namespace) or not keys:
            return {}
        wanted = [k for k in dict.fromkeys(keys) if not _blank(k)]
        if not wanted:
            return {}
        return await self._get_many(namespace, wanted)

    async def put(
        self, namespace: str, key: str, value: Any, ttl: float | None = None
    ) -> None:
        if _blank(namespace) or _blank(key) or value is None:
            return
        logger.debug("Cache.put() %s %s", namespace, key)
        await self._put_many(namespace, {key: value}, ttl)

    async def put_all(
        self, namespace: str, values: Mapping[str, Any], ttl: float | None = None
    ) -> None:
        if _blank(namespace) or not values:
            return
        entries = {
            k: v for k, v in values.items() if not _blank(k) and v is not None
        }
        if not entries:
            return
        logger.debug("Cache.put_all() %s %d", namespace, len(entries))
        await self._put_many(namespace, entries, ttl)

    async def remove(self, namespace: str, key: str) -> None:
        if _blank(namespace) or _blank(key):
            return
        logger.debug("Cache.remove() %s %s", namespace, key)
        await self._remove_many(namespace, [key])

    async def remove_many(self, namespace: str, keys: Iterable[str]) -> None:
        if _blank(namespace) or not keys:
            return
        doomed = [k for k in keys if not _blank(k)]
        if not doomed:
            return
        logger.debug("Cache.remove_many() %s %d", namespace, len(doomed))
        await self._remove_many(namespace, doomed)

    async def remove_all(self, namespace: str) -> None:
        """Drop every entry of namespace; other namespaces are untouched."""
        if _blank(namespace):
            return
        logger.debug("Cache.remove_all() %s", namespace)
        await self._clear(namespace)

    @staticmethod
    def _expires_after(ttl: float | None) -> bool:
        return ttl is not None and ttl > 0

    @abstractmethod
    async def _contains(self, namespace: str, key: str) -> bool: ...

    @abstractmethod
    async def _get(self, namespace: str, key: str) -> Any | None: ...

    @abstractmethod
    async def _get_many(self, namespace: str, keys: list[str]) -> dict[str, Any]: ...

    @abstractmethod
    async def _put_many(
        self, namespace: str, entries: dict[str, Any], ttl: float | None
    ) -> None: ...

    @abstractmethod
    async def _remove_many(self, namespace: str, keys: list[str]) -> None: ...

    @abstractmethod
    async def _clear(self, namespace: str) -> None: ...


class ScopedCache:
    """Namespace-bound view of a cache (the namespace-less convenience forms)."""

    def __init__(self, cache: BaseCache, namespace: str) -> None:
        self.cache = cache
        self.namespace = namespace

    async def contains(self, key: str) -> bool:
        return await self.cache.contains(self.namespace, key)

    async def get(self, key: str) -> Any | None:
        return await self.cache.get(self.namespace, key)

    async def get_all(self, keys: Iterable[str]) -> dict[str, Any]:
        return await self.cache.get_all(self.namespace, keys)

    async def put(self, key: str, value: Any, ttl: float | None = None) -> None:
        await self.cache.put(self.namespace, key, value, ttl)

    async def put_all(self, values: Mapping[str, Any], ttl: float | None = None) -> None:
        await self.cache.put_all(self.namespace, values, ttl)

    async def remove(self, key: str) -> None:
        await self.cache.remove(self.namespace, key)

    async def remove_many(self, keys: Iterable[str]) -> None:
        await self.cache.remove_many(self.namespace, keys)

    async def remove_all(self) -> None:
        await self.cache.remove_all(self.namespace)
