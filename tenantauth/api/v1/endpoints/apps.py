"""Tenant (app) API: registration and secret rotation.

Both routes are protected by a shared secret header:
- Settings must define CREATE_TENANT_SECRET.
- Requests must include X-Create-Tenant-Secret matching that value.
"""

import hmac
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request

from tenantauth.api.v1.dependencies import get_tenant_registry
from tenantauth.application.services import TenantRegistryService
from tenantauth.core.config import get_settings
from tenantauth.domain.exceptions import TenantAlreadyExistsException
from tenantauth.schemas.tenant import (
    TenantCreateRequest,
    TenantCreateResponse,
    TenantCredentialsResponse,
)
from tenantauth.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

CREATE_TENANT_SECRET_HEADER = "X-Create-Tenant-Secret"


def require_create_tenant_secret(request: Request) -> None:
    """Reject the request unless it carries the configured registration secret."""
    settings = get_settings()
    if not settings.create_tenant_secret:
        raise HTTPException(
            status_code=503,
            detail="Tenant creation is not configured (CREATE_TENANT_SECRET is not set).",
        )
    header_secret = request.headers.get(CREATE_TENANT_SECRET_HEADER) or ""
    expected = settings.create_tenant_secret.get_secret_value()
    if not hmac.compare_digest(header_secret.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized tenant creation")


@router.post(
    "",
    response_model=TenantCreateResponse,
    status_code=201,
    dependencies=[Depends(require_create_tenant_secret)],
)
async def create_app(
    body: TenantCreateRequest,
    registry: Annotated[TenantRegistryService, Depends(get_tenant_registry)],
) -> TenantCreateResponse:
    """Register a tenant and return its credentials (shown only once)."""
    tenant = registry.register(body.name, shared=body.shared)
    result = await registry.create(tenant)
    if result is None:
        raise TenantAlreadyExistsException(tenant.id or body.name)
    logger.info("Registered tenant %s", result.tenant_id)
    return TenantCreateResponse(
        tenant_id=result.tenant_id,
        appid=result.appid,
        name=result.name,
        credentials=TenantCredentialsResponse(**result.credentials.to_dict()),
    )


@router.post(
    "/{appid}/secret",
    response_model=TenantCredentialsResponse,
    dependencies=[Depends(require_create_tenant_secret)],
)
async def rotate_app_secret(
    appid: str,
    registry: Annotated[TenantRegistryService, Depends(get_tenant_registry)],
) -> TenantCredentialsResponse:
    """Issue a new secret; every token signed with the old one becomes invalid."""
    credentials = await registry.rotate_secret(appid)
    return TenantCredentialsResponse(**credentials.to_dict())
