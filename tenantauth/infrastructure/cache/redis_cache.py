"""Redis-backed per-tenant cache.

Entries live under 'prefix:namespace:key' with JSON values and native
Redis TTLs. The cache is a best-effort layer: when Redis is unreachable
every operation degrades to a miss or a no-op instead of failing the
request. Call connect() at startup and disconnect() at shutdown.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from tenantauth.core.config import Settings, get_settings
from tenantauth.infrastructure.cache.base import BaseCache
from tenantauth.infrastructure.cache.keys import namespace_pattern, namespaced_key
from tenantauth.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_UNLINK_CHUNK_SIZE = 500


class RedisCache(BaseCache):
    """Async Redis cache with per-namespace key prefixes."""

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            redis_client: Optional client for testing or DI; when given the
                cache is usable without connect().
            settings: Optional settings; defaults to get_settings().
        """
        self.settings = settings or get_settings()
        super().__init__(self.settings.cache_default_namespace)
        self.prefix = self.settings.cache_key_prefix
        self.redis = redis_client
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish the Redis connection. Failure leaves the cache disabled."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Drop the current client and connect again. Returns True if reconnected."""
        if self.redis is None:
            return False
        try:
            await self.redis.aclose()
        except redis.RedisError as e:
            logger.debug("Ignoring error while closing Redis client: %s", e)
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _execute(
        self,
        operation: str,
        call: Callable[[redis.Redis], Awaitable[T]],
        default: T,
    ) -> T:
        """Run call against Redis, retrying once after a dropped connection."""
        if not self.is_available() or self.redis is None:
            return default
        try:
            return await call(self.redis)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect() and self.redis is not None:
                try:
                    return await call(self.redis)
                except redis.RedisError:
                    logger.exception("Cache %s failed after reconnect", operation)
                    return default
            logger.warning("Cache %s unavailable (Redis disconnected)", operation)
            return default
        except redis.RedisError:
            logger.exception("Cache %s error", operation)
            return default

    def _key(self, namespace: str, key: str) -> str:
        return namespaced_key(self.prefix, namespace, key)

    @staticmethod
    def _decode(raw: str | None) -> Any | None:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache value")
            return None

    async def _contains(self, namespace: str, key: str) -> bool:
        full_key = self._key(namespace, key)

        async def call(client: redis.Redis) -> bool:
            return bool(await client.exists(full_key))

        return await self._execute("contains", call, False)

    async def _get(self, namespace: str, key: str) -> Any | None:
        full_key = self._key(namespace, key)

        async def call(client: redis.Redis) -> Any | None:
            value = self._decode(await client.get(full_key))
            logger.debug("Cache %s: %s", "HIT" if value is not None else "MISS", full_key)
            return value

        return await self._execute("get", call, None)

    async def _get_many(self, namespace: str, keys: list[str]) -> dict[str, Any]:
        full_keys = [self._key(namespace, key) for key in keys]

        async def call(client: redis.Redis) -> dict[str, Any]:
            raw_values = await client.mget(full_keys)
            found: dict[str, Any] = {}
            for key, raw in zip(keys, raw_values, strict=True):
                value = self._decode(raw)
                if value is not None:
                    found[key] = value
            return found

        return await self._execute("get_all", call, {})

    async def _put_many(
        self, namespace: str, entries: dict[str, Any], ttl: float | None
    ) -> None:
        try:
            serialized = {
                self._key(namespace, key): json.dumps(value)
                for key, value in entries.items()
            }
        except (TypeError, ValueError) as e:
            logger.warning("Cache put skipped for %s: value not serializable (%s)", namespace, e)
            return
        px = int(ttl * 1000) if self._expires_after(ttl) and ttl is not None else None

        async def call(client: redis.Redis) -> None:
            async with client.pipeline(transaction=False) as pipe:
                for full_key, value in serialized.items():
                    pipe.set(full_key, value, px=px)
                await pipe.execute()

        await self._execute("put", call, None)

    async def _remove_many(self, namespace: str, keys: list[str]) -> None:
        full_keys = [self._key(namespace, key) for key in keys]

        async def call(client: redis.Redis) -> None:
            await client.unlink(*full_keys)

        await self._execute("remove", call, None)

    async def _clear(self, namespace: str) -> None:
        """Delete the namespace with SCAN + batched UNLINK (non-blocking)."""
        pattern = namespace_pattern(self.prefix, namespace)

        async def call(client: redis.Redis) -> int:
            deleted = 0
            chunk: list[str] = []
            async for key in client.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= _UNLINK_CHUNK_SIZE:
                    deleted += int(await client.unlink(*chunk) or 0)
                    chunk = []
            if chunk:
                deleted += int(await client.unlink(*chunk) or 0)
            return deleted

        deleted = await self._execute("remove_all", call, 0)
        if deleted:
            logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
