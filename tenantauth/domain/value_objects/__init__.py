"""Domain value objects."""

from tenantauth.domain.value_objects.core import CompoundCredential, normalize_tenant_name

__all__ = ["CompoundCredential", "normalize_tenant_name"]
