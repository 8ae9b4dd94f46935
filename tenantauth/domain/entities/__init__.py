"""Domain entities.

Pure domain models; no persistence concerns.
"""

from tenantauth.domain.entities.tenant import TenantEntity, generate_security_token
from tenantauth.domain.entities.user import UserEntity

__all__ = [
    "TenantEntity",
    "UserEntity",
    "generate_security_token",
]
