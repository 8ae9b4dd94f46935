"""DTOs for token lifecycle use cases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tenantauth.domain.entities.user import UserEntity
from tenantauth.domain.enums import TokenState
from tenantauth.domain.exceptions import TenantAuthException


@dataclass(frozen=True)
class TokenClaims:
    """Claim set of a session token. Times are JWT NumericDate (epoch seconds)."""

    subject: str
    tenant_id: str
    issued_at: int
    not_before: int
    expires_at: int
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def issued_at_ms(self) -> int:
        return self.issued_at * 1000

    @property
    def expires_at_ms(self) -> int:
        return self.expires_at * 1000

    def renewed(self, now_s: int, lifetime_s: int) -> TokenClaims:
        """Return the same subject/tenant with fresh timestamps."""
        return TokenClaims(
            subject=self.subject,
            tenant_id=self.tenant_id,
            issued_at=now_s,
            not_before=now_s,
            expires_at=now_s + lifetime_s,
            extra=dict(self.extra),
        )


@dataclass(frozen=True)
class IssuedToken:
    """A signed token plus its parsed claims."""

    access_token: str
    claims: TokenClaims

    @property
    def expires(self) -> int:
        """Expiry in epoch millis (as returned to clients)."""
        return self.claims.expires_at_ms

    def to_dict(self) -> dict[str, Any]:
        return {"access_token": self.access_token, "expires": self.expires}


@dataclass(frozen=True)
class Principal:
    """Authenticated (tenant, user) pair attached to a request."""

    user: UserEntity
    tenant_id: str
    claims: TokenClaims

    @property
    def user_id(self) -> str:
        return self.user.id


@dataclass(frozen=True)
class LifecycleResult:
    """Typed outcome of a lifecycle operation.

    Exactly one of the success fields or error is meaningful: check ok first.
    Expected failures are carried in error instead of being raised.
    """

    user: UserEntity | None = None
    token: IssuedToken | None = None
    state: TokenState | None = None
    revoke_tokens_at: int | None = None
    message: str | None = None
    error: TenantAuthException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(
        cls, error: TenantAuthException, state: TokenState | None = None
    ) -> LifecycleResult:
        return cls(error=error, state=state)
