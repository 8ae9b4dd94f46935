"""Tenant domain entity.

A tenant ("application") is an isolated namespace on the shared platform
with its own identifier, signing secret and isolation mode. Identity is
immutable after creation: only the secret (explicit rotation), the active
flag and the custom datatype set may change.
"""

from __future__ import annotations

import base64
import secrets
from dataclasses import dataclass, field
from typing import Any

from tenantauth.core.constants import CREDENTIALS_INFO, TENANT_ID_PREFIX
from tenantauth.domain.enums import TenantIsolation
from tenantauth.domain.exceptions import ValidationException
from tenantauth.domain.value_objects.core import normalize_tenant_name

DEFAULT_SECRET_BYTES = 40


def generate_security_token(nbytes: int = DEFAULT_SECRET_BYTES) -> str:
    """Return nbytes of CSPRNG output encoded as url-safe text."""
    return secrets.token_urlsafe(nbytes)


@dataclass
class TenantEntity:
    """Domain entity for a tenant.

    The identifier invariant is enforced by set_appid/set_id: id is always
    TENANT_ID_PREFIX + appid, where appid is the normalized name. Use
    register() to build a new tenant from a human-chosen name.
    """

    appid: str = ""
    id: str | None = None
    name: str = ""
    secret: str | None = field(default=None, repr=False)
    shared: bool = False
    active: bool = True
    datatypes: set[str] = field(default_factory=set)
    created_at: int | None = None

    def __post_init__(self) -> None:
        if self.id:
            self.set_id(self.id)
        else:
            self.set_appid(self.appid)

    @classmethod
    def register(cls, name: str, *, shared: bool = False) -> TenantEntity:
        """Build a tenant from a display name. The secret is left unset.

        Raises:
            ValidationException: If the name normalizes to an empty slug.
        """
        tenant = cls(appid=name or "", name=(name or "").strip(), shared=shared)
        if not tenant.appid:
            raise ValidationException("Tenant name is required", field="name")
        return tenant

    @classmethod
    def from_identifier(cls, identifier: str) -> TenantEntity:
        """Return a bare tenant carrying only the (normalized) identifier."""
        return cls(id=identifier)

    def set_appid(self, appid: str | None) -> None:
        """Normalize appid and derive id from it (id untouched when blank)."""
        self.appid = normalize_tenant_name(appid)
        if self.appid:
            self.id = f"{TENANT_ID_PREFIX}{self.appid}"

    def set_id(self, raw_id: str | None) -> None:
        """Accept blank or prefixed ids verbatim; otherwise re-derive from name."""
        if not raw_id or not raw_id.strip():
            self.id = raw_id
            return
        if raw_id.startswith(TENANT_ID_PREFIX):
            self.id = raw_id
            self.appid = raw_id[len(TENANT_ID_PREFIX):]
            return
        self.set_appid(raw_id)

    @property
    def namespace(self) -> str:
        """Namespace holding this tenant's users and cached data."""
        return self.appid

    @property
    def isolation(self) -> TenantIsolation:
        return TenantIsolation.SHARED if self.shared else TenantIsolation.DEDICATED

    def reset_secret(self, nbytes: int = DEFAULT_SECRET_BYTES) -> TenantEntity:
        """Assign a new high-entropy secret.

        Tokens signed with the previous secret stop verifying; no revocation
        record is needed.
        """
        self.secret = generate_security_token(max(nbytes, DEFAULT_SECRET_BYTES))
        return self

    def add_datatypes(self, *datatypes: str) -> None:
        for datatype in datatypes:
            if datatype and datatype.strip():
                self.datatypes.add(datatype)

    def remove_datatypes(self, *datatypes: str) -> None:
        for datatype in datatypes:
            self.datatypes.discard(datatype)

    def credentials_view(self) -> dict[str, str]:
        """Return the one-time credentials view (access key + secret key).

        Never stored on the entity; callers show it once at creation or
        rotation time.
        """
        access_key = base64.urlsafe_b64encode((self.id or "").encode("utf-8"))
        return {
            "accessKey": access_key.decode("ascii").rstrip("="),
            "secretKey": self.secret or "",
            "info": CREDENTIALS_INFO,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize for storage/cache (includes the secret)."""
        return {
            "id": self.id,
            "appid": self.appid,
            "name": self.name,
            "secret": self.secret,
            "shared": self.shared,
            "active": self.active,
            "datatypes": sorted(self.datatypes),
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TenantEntity:
        return cls(
            id=data.get("id"),
            name=data.get("name") or "",
            secret=data.get("secret"),
            shared=bool(data.get("shared", False)),
            active=bool(data.get("active", True)),
            datatypes=set(data.get("datatypes") or []),
            created_at=data.get("created_at"),
        )
