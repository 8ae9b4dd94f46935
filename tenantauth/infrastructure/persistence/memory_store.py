"""In-memory object store.

Reference implementation of IObjectStore for tests and local runs. It is
not synchronized and must not be shared across threads. Entities are
deep-copied on the way in and out, so callers never hold a live reference
to stored state and a write is only visible after overwrite().
"""

from __future__ import annotations

import copy
from typing import Any

from tenantauth.application.interfaces.repositories import StoredEntity
from tenantauth.domain.entities import UserEntity


class MemoryStore:
    """Namespace -> id -> entity mapping."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    async def create(self, namespace: str, entity: StoredEntity) -> str | None:
        """Persist entity; return its id, or None if missing id or already present."""
        if not namespace or not entity.id:
            return None
        bucket = self._data.setdefault(namespace, {})
        if entity.id in bucket:
            return None
        bucket[entity.id] = copy.deepcopy(entity)
        return entity.id

    async def read(self, namespace: str, entity_id: str) -> Any | None:
        if not namespace or not entity_id:
            return None
        stored = self._data.get(namespace, {}).get(entity_id)
        return copy.deepcopy(stored) if stored is not None else None

    async def overwrite(self, namespace: str, entity: StoredEntity) -> None:
        if not namespace or not entity.id:
            raise ValueError("overwrite() needs a namespace and an entity id")
        self._data.setdefault(namespace, {})[entity.id] = copy.deepcopy(entity)

    async def find_user_by_identifier(
        self, namespace: str, identifier: str
    ) -> UserEntity | None:
        for stored in self._data.get(namespace, {}).values():
            if isinstance(stored, UserEntity) and stored.identifier == identifier:
                return copy.deepcopy(stored)
        return None

    def count(self, namespace: str) -> int:
        """Number of entities stored in namespace."""
        return len(self._data.get(namespace, {}))
