"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Only wiring of
infrastructure: the Redis cache connection and the shared HTTP client
used by identity providers.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from tenantauth.infrastructure.cache import RedisCache
from tenantauth.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect the cache on startup; close the HTTP client and cache on shutdown."""
    container = app.state.container

    # ---- Startup ----
    if isinstance(container.cache, RedisCache):
        await container.cache.connect()

    yield

    # ---- Shutdown ----
    await container.http_client.aclose()
    logger.info("Identity provider HTTP client closed")

    if isinstance(container.cache, RedisCache):
        await container.cache.disconnect()
        logger.info("Cache disconnected")
