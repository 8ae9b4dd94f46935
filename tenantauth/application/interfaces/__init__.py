"""Application interfaces (ports): store and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from tenantauth.infrastructure or tenantauth.api.
"""

from tenantauth.application.interfaces.repositories import IObjectStore, StoredEntity
from tenantauth.application.interfaces.services import (
    ICacheService,
    IIdentityProvider,
    IIdentityProviderRegistry,
    ISecretResolver,
    ITenantReader,
    ITokenCodec,
)

__all__ = [
    "ICacheService",
    "IIdentityProvider",
    "IIdentityProviderRegistry",
    "IObjectStore",
    "ISecretResolver",
    "ITenantReader",
    "ITokenCodec",
    "StoredEntity",
]
