"""Application DTOs (no dependency on transport or storage)."""

from tenantauth.application.dtos.tenant import TenantCreationResult, TenantCredentials
from tenantauth.application.dtos.token import (
    IssuedToken,
    LifecycleResult,
    Principal,
    TokenClaims,
)

__all__ = [
    "IssuedToken",
    "LifecycleResult",
    "Principal",
    "TenantCreationResult",
    "TenantCredentials",
    "TokenClaims",
]
