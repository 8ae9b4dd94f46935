"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from tenantauth.application.dtos import TokenClaims
    from tenantauth.domain.entities import TenantEntity, UserEntity


class ICacheService(Protocol):
    """Per-tenant cache: namespaced key/value store with optional per-entry TTL.

    Blank namespace/key and None values are ignored (no-op, not an error).
    Operations on one namespace never observe another namespace's entries.
    """

    async def contains(self, namespace: str, key: str) -> bool: ...

    async def get(self, namespace: str, key: str) -> Any | None: ...

    async def get_all(self, namespace: str, keys: Iterable[str]) -> dict[str, Any]: ...

    async def put(
        self, namespace: str, key: str, value: Any, ttl: float | None = None
    ) -> None: ...

    async def put_all(
        self, namespace: str, values: Mapping[str, Any], ttl: float | None = None
    ) -> None: ...

    async def remove(self, namespace: str, key: str) -> None: ...

    async def remove_all(self, namespace: str) -> None: ...

    async def remove_many(self, namespace: str, keys: Iterable[str]) -> None: ...


class ISecretResolver(Protocol):
    """Per-tenant signing key lookup (resolveSecret(tenantId) -> secret)."""

    async def resolve_secret(self, tenant_id: str) -> str | None: ...


class ITenantReader(ISecretResolver, Protocol):
    """Read access to tenant records (the registry implements this)."""

    async def read_by_identifier(self, tenant_id: str) -> TenantEntity | None: ...


class IIdentityProvider(Protocol):
    """Reduces external provider credentials to a local user.

    credential_parts is 1 for bearer-token providers and 2 for providers
    needing a token pair (passed joined by the configured separator).
    """

    name: str
    credential_parts: int

    async def get_or_create_user(
        self, namespace: str, *credentials: str
    ) -> UserEntity | None: ...


class IIdentityProviderRegistry(Protocol):
    """Provider name -> adapter lookup used at issuance time."""

    def get(self, name: str) -> IIdentityProvider | None: ...


class ITokenCodec(Protocol):
    """Builds, signs, verifies and parses session tokens."""

    def build_claims(
        self,
        subject: str,
        tenant_id: str,
        issued_at: int,
        lifetime_seconds: int,
    ) -> TokenClaims: ...

    def sign(self, claims: TokenClaims | None, secret: str | None) -> str | None: ...

    def verify_signature(self, token: str | None, secret: str | None) -> bool: ...

    def parse(self, token: str | None) -> TokenClaims | None: ...
