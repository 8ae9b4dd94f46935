"""Presentation-layer dependency injection (composition root).

build_container() wires the store, cache, identity providers and
services from settings; create_app() keeps the result on app.state so
both routes (through the Depends() helpers below) and the session token
filter use the same instances. Tests pass their own container.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated

import httpx
from fastapi import Depends, Request

from tenantauth.application.dtos import Principal
from tenantauth.application.interfaces import IIdentityProviderRegistry, IObjectStore
from tenantauth.application.services import TenantRegistryService, TokenLifecycleService
from tenantauth.core.config import Settings, get_settings
from tenantauth.core.constants import BEARER_CHALLENGE
from tenantauth.domain.exceptions import UnauthorizedException
from tenantauth.infrastructure.cache import BaseCache, MemoryCache, RedisCache
from tenantauth.infrastructure.external.identity import IdentityProviderRegistry
from tenantauth.infrastructure.persistence import MemoryStore
from tenantauth.infrastructure.security import TokenCodec
from tenantauth.shared.utils.datetime import utc_now_ms


@dataclass
class AuthContainer:
    """Process-wide collaborators shared by routes and middleware."""

    settings: Settings
    store: IObjectStore
    cache: BaseCache
    http_client: httpx.AsyncClient
    codec: TokenCodec
    tenants: TenantRegistryService
    providers: IIdentityProviderRegistry
    lifecycle: TokenLifecycleService


def build_cache(settings: Settings) -> BaseCache:
    """Return the cache backend selected by settings.cache_backend."""
    if settings.cache_backend == "redis":
        return RedisCache(settings=settings)
    return MemoryCache(default_namespace=settings.cache_default_namespace)


def build_container(
    settings: Settings | None = None,
    *,
    store: IObjectStore | None = None,
    cache: BaseCache | None = None,
    http_client: httpx.AsyncClient | None = None,
    providers: IIdentityProviderRegistry | None = None,
    clock: Callable[[], int] = utc_now_ms,
) -> AuthContainer:
    """Wire every service from settings; any collaborator may be overridden."""
    settings = settings or get_settings()
    # TODO: replace MemoryStore with a persistent IObjectStore before running more than one worker.
    store = store if store is not None else MemoryStore()
    cache = cache if cache is not None else build_cache(settings)
    http_client = http_client or httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    codec = TokenCodec(settings.jwt_algorithm)
    tenants = TenantRegistryService(
        store,
        cache,
        root_namespace=settings.root_namespace,
        cache_ttl=settings.cache_ttl_tenants,
        secret_bytes=settings.tenant_secret_bytes,
    )
    if providers is None:
        providers = IdentityProviderRegistry.default(store, http_client, settings)
    lifecycle = TokenLifecycleService(
        tenants,
        store,
        codec,
        providers,
        session_timeout_seconds=settings.session_timeout_seconds,
        credential_separator=settings.credential_separator,
        clock=clock,
    )
    return AuthContainer(
        settings=settings,
        store=store,
        cache=cache,
        http_client=http_client,
        codec=codec,
        tenants=tenants,
        providers=providers,
        lifecycle=lifecycle,
    )


def get_container(request: Request) -> AuthContainer:
    return request.app.state.container


def get_tenant_registry(
    container: Annotated[AuthContainer, Depends(get_container)],
) -> TenantRegistryService:
    return container.tenants


def get_lifecycle_service(
    container: Annotated[AuthContainer, Depends(get_container)],
) -> TokenLifecycleService:
    return container.lifecycle


def get_optional_principal(request: Request) -> Principal | None:
    """Principal attached by the session token filter, if any."""
    return getattr(request.state, "principal", None)


def get_principal(
    request: Request,
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
) -> Principal:
    """Require an authenticated principal.

    Raises:
        UnauthorizedException: Carrying the challenge chosen by the filter
            (plain Bearer when no token was sent).
    """
    if principal is None:
        challenge = getattr(request.state, "auth_challenge", None) or BEARER_CHALLENGE
        raise UnauthorizedException("Authentication required.", challenge=challenge)
    return principal
