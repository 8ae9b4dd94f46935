"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from tenantauth.domain.entities import TenantEntity, UserEntity
from tenantauth.domain.enums import TenantIsolation, TokenState
from tenantauth.domain.exceptions import (
    AuthenticationException,
    BadRequestException,
    InternalErrorException,
    SigningFailureException,
    TenantAlreadyExistsException,
    TenantAuthException,
    TenantNotFoundException,
    UnauthorizedException,
    UserNotFoundException,
    ValidationException,
)
from tenantauth.domain.value_objects import CompoundCredential, normalize_tenant_name

__all__ = [
    # Entities
    "TenantEntity",
    "UserEntity",
    # Enums
    "TenantIsolation",
    "TokenState",
    # Exceptions
    "AuthenticationException",
    "BadRequestException",
    "InternalErrorException",
    "SigningFailureException",
    "TenantAlreadyExistsException",
    "TenantAuthException",
    "TenantNotFoundException",
    "UnauthorizedException",
    "UserNotFoundException",
    "ValidationException",
    # Value objects
    "CompoundCredential",
    "normalize_tenant_name",
]
