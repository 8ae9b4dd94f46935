"""Tests for the in-memory per-tenant cache (lazy expiry, namespace isolation)."""

import pytest

from tenantauth.infrastructure.cache import MemoryCache


class _Clock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> _Clock:
    return _Clock()


@pytest.fixture
def cache(clock: _Clock) -> MemoryCache:
    return MemoryCache(default_namespace="root", clock=clock)


async def test_put_then_get(cache: MemoryCache) -> None:
    await cache.put("app1", "k", {"a": 1})
    assert await cache.get("app1", "k") == {"a": 1}
    assert await cache.contains("app1", "k") is True


@pytest.mark.parametrize(
    ("namespace", "key", "value"),
    [("", "k", 1), ("  ", "k", 1), ("app1", "", 1), ("app1", " ", 1), ("app1", "k", None)],
)
async def test_put_ignores_blank_arguments_and_none(
    cache: MemoryCache, namespace: str, key: str, value: object
) -> None:
    """Blank namespace/key or None value is a no-op, not an error."""
    await cache.put(namespace, key, value)
    assert len(cache) == 0


async def test_get_with_blank_arguments_returns_none(cache: MemoryCache) -> None:
    await cache.put("app1", "k", 1)
    assert await cache.get("", "k") is None
    assert await cache.get("app1", "") is None
    assert await cache.contains("", "k") is False


async def test_entry_expires_lazily(cache: MemoryCache, clock: _Clock) -> None:
    """An expired entry stays stored until read, then is evicted."""
    await cache.put("app1", "k", "v", ttl=10)
    clock.now += 10
    assert await cache.get("app1", "k") == "v"
    clock.now += 0.001
    assert len(cache) == 1
    assert await cache.get("app1", "k") is None
    assert len(cache) == 0


async def test_entry_without_ttl_never_expires(cache: MemoryCache, clock: _Clock) -> None:
    await cache.put("app1", "k", "v")
    await cache.put("app1", "zero", "v", ttl=0)
    clock.now += 10**9
    assert await cache.get("app1", "k") == "v"
    assert await cache.get("app1", "zero") == "v"


async def test_contains_evicts_expired(cache: MemoryCache, clock: _Clock) -> None:
    await cache.put("app1", "k", "v", ttl=1)
    clock.now += 2
    assert await cache.contains("app1", "k") is False
    assert len(cache) == 0


async def test_get_all_omits_missing_and_expired(cache: MemoryCache, clock: _Clock) -> None:
    """get_all returns only live entries; blank keys are skipped."""
    await cache.put("app1", "short", 1, ttl=1)
    await cache.put("app1", "long", 2, ttl=100)
    clock.now += 5
    result = await cache.get_all("app1", ["short", "long", "missing", ""])
    assert result == {"long": 2}


async def test_put_all_filters_entries(cache: MemoryCache) -> None:
    """put_all drops blank keys and None values, stores the rest."""
    await cache.put_all("app1", {"a": 1, "": 2, "b": None, "c": 3})
    assert await cache.get_all("app1", ["a", "b", "c"]) == {"a": 1, "c": 3}
    assert len(cache) == 2


async def test_put_all_applies_ttl_to_every_entry(cache: MemoryCache, clock: _Clock) -> None:
    await cache.put_all("app1", {"a": 1, "b": 2}, ttl=5)
    clock.now += 6
    assert await cache.get_all("app1", ["a", "b"]) == {}


async def test_remove_and_remove_many(cache: MemoryCache) -> None:
    await cache.put_all("app1", {"a": 1, "b": 2, "c": 3})
    await cache.remove("app1", "a")
    await cache.remove_many("app1", ["b", "missing", ""])
    assert await cache.get_all("app1", ["a", "b", "c"]) == {"c": 3}


async def test_namespaces_are_isolated(cache: MemoryCache) -> None:
    """Identical keys in two namespaces never see or touch each other."""
    await cache.put("app1", "k", "one")
    await cache.put("app2", "k", "two")
    assert await cache.get("app1", "k") == "one"
    assert await cache.get("app2", "k") == "two"

    await cache.remove("app1", "k")
    assert await cache.get("app2", "k") == "two"

    await cache.put("app1", "k", "again")
    await cache.remove_all("app2")
    assert await cache.get("app1", "k") == "again"
    assert await cache.get("app2", "k") is None


async def test_scoped_view_uses_default_namespace(cache: MemoryCache) -> None:
    """scoped() without a namespace binds to the default namespace."""
    root = cache.scoped()
    await root.put("k", "v")
    assert await cache.get("root", "k") == "v"
    assert await root.get("k") == "v"

    app1 = cache.scoped("app1")
    await app1.put_all({"x": 1})
    assert await app1.get_all(["x", "k"]) == {"x": 1}
    await app1.remove_all()
    assert await root.contains("k") is True
