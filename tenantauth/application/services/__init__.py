"""Application services (use cases)."""

from tenantauth.application.services.tenant_registry_service import (
    TenantRegistryService,
)
from tenantauth.application.services.token_lifecycle_service import (
    TokenLifecycleService,
)
from tenantauth.application.services.token_state import evaluate_token_state

__all__ = [
    "TenantRegistryService",
    "TokenLifecycleService",
    "evaluate_token_state",
]
