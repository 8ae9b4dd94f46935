"""DTOs for tenant use cases."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantCredentials:
    """One-time credentials view: shown at creation/rotation, never persisted."""

    tenant_id: str
    access_key: str
    secret_key: str
    info: str

    def to_dict(self) -> dict[str, str]:
        return {
            "accessKey": self.access_key,
            "secretKey": self.secret_key,
            "info": self.info,
        }


@dataclass(frozen=True)
class TenantCreationResult:
    """Result of creating a tenant: its identifier and the one-time credentials."""

    tenant_id: str
    appid: str
    name: str
    credentials: TenantCredentials
