"""Tests for RedisCache against a mocked redis.asyncio client."""

import json
from collections.abc import AsyncIterator
from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as redis

from tenantauth.core.config import Settings
from tenantauth.infrastructure.cache import RedisCache, namespace_pattern, namespaced_key


async def _aiter(items: list[str]) -> AsyncIterator[str]:
    for item in items:
        yield item


@pytest.fixture
def client() -> MagicMock:
    mock = MagicMock()
    mock.get = AsyncMock(return_value=None)
    mock.mget = AsyncMock(return_value=[])
    mock.exists = AsyncMock(return_value=0)
    mock.unlink = AsyncMock(return_value=0)
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[True])
    mock.pipeline.return_value.__aenter__.return_value = pipe
    mock.pipe = pipe
    return mock


@pytest.fixture
def cache(client: MagicMock) -> RedisCache:
    settings = Settings(cache_key_prefix="ta", cache_default_namespace="root")
    return RedisCache(redis_client=client, settings=settings)


def test_key_format() -> None:
    """Keys are prefix:namespace:key; the key part may contain the separator."""
    assert namespaced_key("ta", "my-app", "tenant:app:x") == "ta:my-app:tenant:app:x"
    assert namespace_pattern("ta", "my-app") == "ta:my-app:*"


@pytest.mark.parametrize("namespace", ["a:b", "a*", "a?", "a[b]"])
def test_namespace_with_separator_or_glob_is_rejected(namespace: str) -> None:
    """Such a namespace could match another namespace's keys on remove_all."""
    with pytest.raises(ValueError):
        namespace_pattern("ta", namespace)


async def test_get_decodes_json(cache: RedisCache, client: MagicMock) -> None:
    client.get.return_value = json.dumps({"a": 1})
    assert await cache.get("my-app", "k") == {"a": 1}
    client.get.assert_awaited_once_with("ta:my-app:k")


async def test_put_with_ttl_sets_px(cache: RedisCache, client: MagicMock) -> None:
    """TTL seconds become a millisecond expiry on SET."""
    await cache.put("my-app", "k", {"a": 1}, ttl=1.5)
    client.pipe.set.assert_called_once_with("ta:my-app:k", '{"a": 1}', px=1500)
    client.pipe.execute.assert_awaited_once()


async def test_put_without_ttl_has_no_expiry(cache: RedisCache, client: MagicMock) -> None:
    await cache.put("my-app", "k", "v")
    client.pipe.set.assert_called_once_with("ta:my-app:k", '"v"', px=None)


async def test_put_ignores_none_value(cache: RedisCache, client: MagicMock) -> None:
    await cache.put("my-app", "k", None)
    client.pipeline.assert_not_called()


async def test_put_skips_unserializable_value(cache: RedisCache, client: MagicMock) -> None:
    await cache.put("my-app", "k", object())
    client.pipeline.assert_not_called()


async def test_get_all_omits_missing(cache: RedisCache, client: MagicMock) -> None:
    client.mget.return_value = ['"one"', None]
    assert await cache.get_all("my-app", ["a", "b"]) == {"a": "one"}
    client.mget.assert_awaited_once_with(["ta:my-app:a", "ta:my-app:b"])


async def test_remove_many_unlinks_full_keys(cache: RedisCache, client: MagicMock) -> None:
    await cache.remove_many("my-app", ["a", "", "b"])
    client.unlink.assert_awaited_once_with("ta:my-app:a", "ta:my-app:b")


async def test_remove_all_scans_only_its_namespace(cache: RedisCache, client: MagicMock) -> None:
    """remove_all SCANs with the namespace pattern and UNLINKs what it finds."""
    client.scan_iter = MagicMock(return_value=_aiter(["ta:my-app:a", "ta:my-app:b"]))
    client.unlink.return_value = 2
    await cache.remove_all("my-app")
    client.scan_iter.assert_called_once_with(match="ta:my-app:*")
    client.unlink.assert_awaited_once_with("ta:my-app:a", "ta:my-app:b")


async def test_redis_error_degrades_to_miss(cache: RedisCache, client: MagicMock) -> None:
    """A Redis error is logged and reported as a miss, not raised."""
    client.get.side_effect = redis.ResponseError("boom")
    assert await cache.get("my-app", "k") is None
    client.exists.side_effect = redis.ResponseError("boom")
    assert await cache.contains("my-app", "k") is False


async def test_unavailable_cache_is_a_no_op() -> None:
    """Without a connection every call is a miss or no-op."""
    cache = RedisCache(settings=Settings(cache_key_prefix="ta"))
    assert cache.is_available() is False
    await cache.put("my-app", "k", "v")
    assert await cache.get("my-app", "k") is None
    assert await cache.get_all("my-app", ["k"]) == {}
