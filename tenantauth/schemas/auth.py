"""Session token API schemas (management endpoint and /me)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from tenantauth.application.dtos import IssuedToken, LifecycleResult, Principal
from tenantauth.domain.entities import UserEntity


class TokenIssueRequest(BaseModel):
    """Body of POST on the management path.

    Fields are optional here so that a missing one is reported as a
    BAD_REQUEST by the lifecycle controller rather than a 422.
    """

    model_config = ConfigDict(extra="ignore")

    provider: str | None = Field(default=None, description="Identity provider name")
    appid: str | None = Field(default=None, description="Tenant identifier or name")
    token: str | None = Field(
        default=None,
        description="Provider access token ('token:secret' for twitter)",
    )


class UserResponse(BaseModel):
    """Local user as returned to clients."""

    id: str
    namespace: str
    identifier: str
    name: str | None = None
    email: str | None = None
    picture: str | None = None
    active: bool = True
    revoke_tokens_at: int | None = None

    @classmethod
    def from_entity(cls, user: UserEntity) -> UserResponse:
        return cls(
            id=user.id,
            namespace=user.namespace,
            identifier=user.identifier,
            name=user.name,
            email=user.email,
            picture=user.picture,
            active=user.active,
            revoke_tokens_at=user.revoke_tokens_at,
        )


class TokenResponse(BaseModel):
    """Signed session token and its expiry (epoch millis)."""

    access_token: str
    expires: int

    @classmethod
    def from_issued(cls, token: IssuedToken) -> TokenResponse:
        return cls(access_token=token.access_token, expires=token.expires)


class AuthResponse(BaseModel):
    """Response of issue (POST) and refresh (GET)."""

    user: UserResponse
    token: TokenResponse

    @classmethod
    def from_result(cls, result: LifecycleResult) -> AuthResponse:
        return cls(
            user=UserResponse.from_entity(result.user),
            token=TokenResponse.from_issued(result.token),
        )


class RevokeResponse(BaseModel):
    """Response of revoke (DELETE)."""

    code: int = 200
    message: str
    revoke_tokens_at: int


class PrincipalResponse(BaseModel):
    """Response of GET /me: the authenticated principal."""

    tenant_id: str
    user: UserResponse
    issued_at: int
    expires: int

    @classmethod
    def from_principal(cls, principal: Principal) -> PrincipalResponse:
        return cls(
            tenant_id=principal.tenant_id,
            user=UserResponse.from_entity(principal.user),
            issued_at=principal.claims.issued_at_ms,
            expires=principal.claims.expires_at_ms,
        )
