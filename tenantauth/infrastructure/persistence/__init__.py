"""Object store implementations for tenant and user records."""

from tenantauth.infrastructure.persistence.memory_store import MemoryStore

__all__ = ["MemoryStore"]
