"""Per-tenant cache backends and key utilities.

MemoryCache is the in-process reference (tests, single worker);
RedisCache is the shared backend. Both expose the BaseCache API.
"""

from tenantauth.infrastructure.cache.base import BaseCache, ScopedCache
from tenantauth.infrastructure.cache.keys import (
    namespace_pattern,
    namespaced_key,
)
from tenantauth.infrastructure.cache.memory_cache import MemoryCache
from tenantauth.infrastructure.cache.redis_cache import RedisCache

__all__ = [
    "BaseCache",
    "MemoryCache",
    "RedisCache",
    "ScopedCache",
    "namespace_pattern",
    "namespaced_key",
]
