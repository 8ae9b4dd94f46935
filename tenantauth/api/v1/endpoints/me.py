"""Current principal endpoint: the authorization stage consuming passive authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends

from tenantauth.api.v1.dependencies import get_principal
from tenantauth.application.dtos import Principal
from tenantauth.schemas.auth import PrincipalResponse

router = APIRouter()


@router.get("", response_model=PrincipalResponse)
async def read_me(
    principal: Annotated[Principal, Depends(get_principal)],
) -> PrincipalResponse:
    """Return the tenant and user behind the bearer token (401 when anonymous)."""
    return PrincipalResponse.from_principal(principal)
