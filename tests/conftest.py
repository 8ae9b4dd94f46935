"""Pytest configuration and fixtures for tenantauth.

HTTP tests run against create_app() with an in-memory store and cache, a
controllable clock and fake identity providers, so no network, Redis or
provider account is needed.
"""

from __future__ import annotations

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from tenantauth.api.v1.dependencies import AuthContainer, build_container
from tenantauth.application.dtos import TenantCreationResult
from tenantauth.core.config import Settings, get_settings
from tenantauth.domain.entities import UserEntity
from tenantauth.infrastructure.cache import MemoryCache
from tenantauth.infrastructure.external.identity import IdentityProviderRegistry
from tenantauth.infrastructure.persistence import MemoryStore
from tenantauth.main import create_app

TEST_CREATE_TENANT_SECRET = "test-create-tenant-secret"
SESSION_TIMEOUT_SECONDS = 3600
START_MS = 1_700_000_000_000


class FakeClock:
    """Epoch-millis clock the tests move by hand."""

    def __init__(self, now_ms: int = START_MS) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def seconds(self) -> float:
        return self.now_ms / 1000

    def advance(self, seconds: float) -> None:
        self.now_ms += int(seconds * 1000)


class FakeProvider:
    """Identity provider that accepts a fixed set of credentials.

    accepted maps the credential (parts joined by '|') to a provider user id.
    """

    def __init__(
        self,
        store: MemoryStore,
        name: str,
        accepted: dict[str, str],
        credential_parts: int = 1,
    ) -> None:
        self.store = store
        self.name = name
        self.accepted = accepted
        self.credential_parts = credential_parts
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    async def get_or_create_user(
        self, namespace: str, *credentials: str
    ) -> UserEntity | None:
        self.calls.append((namespace, credentials))
        provider_user_id = self.accepted.get("|".join(credentials))
        if provider_user_id is None:
            return None
        identifier = f"{self.name}:{provider_user_id}"
        user = await self.store.find_user_by_identifier(namespace, identifier)
        if user is None:
            user = UserEntity(
                id=f"user-{provider_user_id}",
                namespace=namespace,
                identifier=identifier,
                name=f"User {provider_user_id}",
            )
            await self.store.create(namespace, user)
        return user


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Test settings from env; cache cleared before and after."""
    monkeypatch.setenv("CREATE_TENANT_SECRET", TEST_CREATE_TENANT_SECRET)
    monkeypatch.setenv("SESSION_TIMEOUT_SECONDS", str(SESSION_TIMEOUT_SECONDS))
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCache:
    return MemoryCache(clock=clock.seconds)


@pytest.fixture
def github(store: MemoryStore) -> FakeProvider:
    return FakeProvider(store, "github", {"gh-token": "1001", "gh-token-2": "1002"})


@pytest.fixture
def twitter(store: MemoryStore) -> FakeProvider:
    return FakeProvider(store, "twitter", {"tw-token|tw-secret": "2001"}, credential_parts=2)


@pytest.fixture
async def container(
    settings: Settings,
    store: MemoryStore,
    cache: MemoryCache,
    clock: FakeClock,
    github: FakeProvider,
    twitter: FakeProvider,
) -> AuthContainer:
    """Fully wired collaborators with fakes at the edges."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(500))
    )
    built = build_container(
        settings,
        store=store,
        cache=cache,
        http_client=http_client,
        providers=IdentityProviderRegistry([github, twitter]),
        clock=clock,
    )
    yield built
    await http_client.aclose()


@pytest.fixture
async def tenant(container: AuthContainer) -> TenantCreationResult:
    """A registered tenant named 'My App' (id app:my-app)."""
    result = await container.tenants.create(container.tenants.register("My App"))
    assert result is not None
    return result


@pytest.fixture
async def client(container: AuthContainer) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    app = create_app(container)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
