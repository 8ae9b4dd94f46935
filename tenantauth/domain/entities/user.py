"""User domain entity.

Users are owned by exactly one tenant (namespace). The only state the
authentication core mutates is revoke_tokens_at.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class UserEntity:
    """A local user resolved from an external identity provider.

    Attributes:
        id: User id, unique within its namespace.
        namespace: Owning tenant namespace (the tenant's appid).
        identifier: Provider-scoped identity, e.g. 'github:12345'.
        revoke_tokens_at: Epoch millis; tokens issued strictly before it are
            revoked. None when no revocation is standing.
    """

    id: str
    namespace: str
    identifier: str
    name: str | None = None
    email: str | None = None
    picture: str | None = None
    active: bool = True
    revoke_tokens_at: int | None = None
    created_at: int | None = None

    def revokes(self, issued_at_ms: int) -> bool:
        """Return True if a token issued at issued_at_ms is revoked for this user."""
        return self.revoke_tokens_at is not None and issued_at_ms < self.revoke_tokens_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "namespace": self.namespace,
            "identifier": self.identifier,
            "name": self.name,
            "email": self.email,
            "picture": self.picture,
            "active": self.active,
            "revoke_tokens_at": self.revoke_tokens_at,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserEntity:
        return cls(
            id=data["id"],
            namespace=data["namespace"],
            identifier=data["identifier"],
            name=data.get("name"),
            email=data.get("email"),
            picture=data.get("picture"),
            active=bool(data.get("active", True)),
            revoke_tokens_at=data.get("revoke_tokens_at"),
            created_at=data.get("created_at"),
        )
