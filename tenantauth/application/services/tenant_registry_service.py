"""Tenant registry: registration, creation, lookup and secret rotation.

Tenant records live in the root namespace of the object store and are
read through the per-tenant cache. The registry is also the secret
resolver used to sign and verify session tokens, so key lookup is always
keyed by tenant identifier.
"""

from __future__ import annotations

from tenantauth.application.dtos import TenantCreationResult, TenantCredentials
from tenantauth.application.interfaces import ICacheService, IObjectStore
from tenantauth.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_TENANT
from tenantauth.domain.entities import TenantEntity
from tenantauth.domain.exceptions import TenantNotFoundException
from tenantauth.shared.telemetry.logging import get_logger
from tenantauth.shared.utils.datetime import utc_now_ms

logger = get_logger(__name__)


def _tenant_cache_key(tenant_id: str) -> str:
    return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}{tenant_id}"


def _credentials(tenant: TenantEntity) -> TenantCredentials:
    view = tenant.credentials_view()
    return TenantCredentials(
        tenant_id=tenant.id or "",
        access_key=view["accessKey"],
        secret_key=view["secretKey"],
        info=view["info"],
    )


class TenantRegistryService:
    """Creates, reads and rotates tenants; resolves their signing secrets."""

    def __init__(
        self,
        store: IObjectStore,
        cache: ICacheService | None = None,
        *,
        root_namespace: str = "tenantauth",
        cache_ttl: int = 900,
        secret_bytes: int = 40,
    ) -> None:
        self.store = store
        self.cache = cache
        self.root_namespace = root_namespace
        self.cache_ttl = cache_ttl
        self.secret_bytes = secret_bytes

    @staticmethod
    def register(name: str, *, shared: bool = False) -> TenantEntity:
        """Build an unsaved tenant from a display name (secret left unset)."""
        return TenantEntity.register(name, shared=shared)

    async def create(self, tenant: TenantEntity) -> TenantCreationResult | None:
        """Persist a new tenant.

        Generates a secret if none is set. Returns None, leaving the stored
        tenant untouched, if the identifier is already taken. The returned
        credentials are the only place the secret is handed out.
        """
        if not tenant.id:
            return None
        if await self.store.read(self.root_namespace, tenant.id) is not None:
            logger.info("Tenant %s already exists", tenant.id)
            return None
        if not tenant.secret:
            tenant.reset_secret(self.secret_bytes)
        if tenant.created_at is None:
            tenant.created_at = utc_now_ms()
        created_id = await self.store.create(self.root_namespace, tenant)
        if created_id is None:
            return None
        logger.info("Tenant created: %s (%s)", created_id, tenant.isolation.value)
        return TenantCreationResult(
            tenant_id=created_id,
            appid=tenant.appid,
            name=tenant.name,
            credentials=_credentials(tenant),
        )

    async def read_tenant(self, tenant: TenantEntity | None) -> TenantEntity | None:
        """Read the stored record for a tenant carrying an id."""
        if tenant is None or not tenant.id:
            return None
        return await self.read_by_identifier(tenant.id)

    async def read_by_identifier(self, tenant_id: str | None) -> TenantEntity | None:
        """Return the tenant for an identifier or bare name, or None.

        'my-app' and 'app:my-app' name the same tenant.
        """
        if not tenant_id or not tenant_id.strip():
            return None
        normalized = TenantEntity.from_identifier(tenant_id.strip()).id
        if not normalized:
            return None
        if self.cache is not None:
            cached = await self.cache.get(self.root_namespace, _tenant_cache_key(normalized))
            if cached is not None:
                return TenantEntity.from_dict(cached)
        tenant = await self.store.read(self.root_namespace, normalized)
        if tenant is not None and self.cache is not None:
            await self.cache.put(
                self.root_namespace,
                _tenant_cache_key(normalized),
                tenant.to_dict(),
                self.cache_ttl,
            )
        return tenant

    async def rotate_secret(self, tenant_id: str) -> TenantCredentials:
        """Replace a tenant's secret; every token signed with the old one stops verifying.

        Raises:
            TenantNotFoundException: If the tenant does not exist.
        """
        tenant = await self.read_by_identifier(tenant_id)
        if tenant is None or not tenant.id:
            raise TenantNotFoundException(tenant_id)
        tenant.reset_secret(self.secret_bytes)
        await self.store.overwrite(self.root_namespace, tenant)
        if self.cache is not None:
            await self.cache.remove(self.root_namespace, _tenant_cache_key(tenant.id))
        logger.info("Tenant secret rotated: %s", tenant.id)
        return _credentials(tenant)

    async def resolve_secret(self, tenant_id: str) -> str | None:
        """Return the current signing secret of an active tenant, or None."""
        tenant = await self.read_by_identifier(tenant_id)
        if tenant is None or not tenant.active:
            return None
        return tenant.secret
