"""Repository interfaces (ports) for the application layer.

The persistent object store is an external collaborator; this core only
relies on the contract below. No transactional guarantees are assumed
beyond atomicity of a single entity write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from tenantauth.domain.entities import UserEntity


class StoredEntity(Protocol):
    """Anything the store can hold: it must carry an id."""

    id: str | None


class IObjectStore(Protocol):
    """Protocol for the tenant/user object store (DIP)."""

    async def create(self, namespace: str, entity: StoredEntity) -> str | None:
        """Persist a new entity; return its id, or None if it already exists."""

    async def read(self, namespace: str, entity_id: str) -> Any | None:
        """Return the entity with entity_id in namespace, or None."""

    async def overwrite(self, namespace: str, entity: StoredEntity) -> None:
        """Replace the stored entity (create it if absent)."""

    async def find_user_by_identifier(
        self, namespace: str, identifier: str
    ) -> UserEntity | None:
        """Return the user whose provider identifier matches, or None."""
