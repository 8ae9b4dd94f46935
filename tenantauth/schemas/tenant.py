"""Tenant API schemas."""

from pydantic import BaseModel, Field, field_validator

from tenantauth.domain.value_objects import normalize_tenant_name


class TenantCreateRequest(BaseModel):
    """Request body for registering a tenant.

    The name is normalized into the tenant slug ('My App!' -> 'my-app');
    names that normalize to nothing are rejected.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    shared: bool = Field(
        default=False,
        description="Commingle data with other tenants under key-prefix separation",
    )

    @field_validator("name")
    @classmethod
    def validate_name_has_slug(cls, v: str) -> str:
        if not normalize_tenant_name(v):
            raise ValueError("name must contain at least one letter or digit")
        return v


class TenantCredentialsResponse(BaseModel):
    """One-time credentials view."""

    accessKey: str
    secretKey: str
    info: str


class TenantCreateResponse(BaseModel):
    """Response after tenant creation. The secret is shown only here."""

    tenant_id: str
    appid: str
    name: str
    credentials: TenantCredentialsResponse
