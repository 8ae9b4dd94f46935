"""Token lifecycle: issue, refresh, revoke and authenticate session tokens.

Tokens are never stored. Every call re-derives the token state from the
claims, the owning tenant's current secret and the user's revocation
timestamp (see token_state.evaluate_token_state). Expected failures come
back inside LifecycleResult.error; only store or programming faults
raise.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from tenantauth.application.dtos import IssuedToken, LifecycleResult, TokenClaims
from tenantauth.application.interfaces import (
    IIdentityProviderRegistry,
    IObjectStore,
    ITenantReader,
    ITokenCodec,
)
from tenantauth.application.services.token_state import evaluate_token_state
from tenantauth.core.constants import BEARER_CHALLENGE
from tenantauth.domain.entities import TenantEntity, UserEntity
from tenantauth.domain.enums import TokenState
from tenantauth.domain.exceptions import (
    AuthenticationException,
    BadRequestException,
    SigningFailureException,
    TenantNotFoundException,
    UnauthorizedException,
)
from tenantauth.domain.value_objects import CompoundCredential
from tenantauth.shared.telemetry.logging import get_logger
from tenantauth.shared.utils.datetime import from_timestamp_ms_utc, utc_now_ms

logger = get_logger(__name__)

MISSING_ISSUE_FIELDS = (
    "Some of the required query parameters 'provider', 'appid', 'token', are missing."
)
REVOKE_AT_FIELD = "revokeTokensAt"


@dataclass(frozen=True)
class _Resolution:
    """What a presented token resolves to; tenant/user are None when INVALID."""

    state: TokenState
    claims: TokenClaims | None = None
    tenant: TenantEntity | None = None
    user: UserEntity | None = None


def _missing_token() -> UnauthorizedException:
    return UnauthorizedException("Bearer token is missing.", challenge=BEARER_CHALLENGE)


class TokenLifecycleService:
    """Orchestrates tenant registry, token codec, identity providers and user store."""

    def __init__(
        self,
        tenants: ITenantReader,
        store: IObjectStore,
        codec: ITokenCodec,
        providers: IIdentityProviderRegistry,
        *,
        session_timeout_seconds: int = 24 * 60 * 60,
        credential_separator: str = ":",
        clock: Callable[[], int] = utc_now_ms,
        check_not_before: bool = False,
    ) -> None:
        """Initialize the controller.

        Args:
            tenants: Tenant lookup and secret resolution.
            store: User store (users live in their tenant's namespace).
            codec: Token signer/verifier.
            providers: Identity provider adapters by name.
            session_timeout_seconds: Lifetime of issued and reissued tokens.
            credential_separator: Separator of compound provider credentials.
            clock: Current time in epoch millis (injectable for tests).
            check_not_before: Reject tokens presented before their nbf.
        """
        self.tenants = tenants
        self.store = store
        self.codec = codec
        self.providers = providers
        self.session_timeout_seconds = session_timeout_seconds
        self.credential_separator = credential_separator
        self.clock = clock
        self.check_not_before = check_not_before

    async def issue(
        self,
        provider: str | None,
        tenant_id: str | None,
        external_token: str | None,
    ) -> LifecycleResult:
        """Exchange an identity provider token for a session token.

        A successful fresh login clears any standing revocation timestamp.
        """
        if not provider or not tenant_id or not external_token:
            return LifecycleResult.failure(BadRequestException(MISSING_ISSUE_FIELDS))
        if not provider.strip() or not tenant_id.strip() or not external_token.strip():
            return LifecycleResult.failure(BadRequestException(MISSING_ISSUE_FIELDS))

        provider_name = provider.strip().lower()
        adapter = self.providers.get(provider_name)
        if adapter is None:
            return LifecycleResult.failure(
                BadRequestException(f"Unsupported provider: {provider}", field="provider")
            )

        credentials: tuple[str, ...] = (external_token,)
        if adapter.credential_parts == 2:
            try:
                pair = CompoundCredential.parse(external_token, self.credential_separator)
            except ValueError:
                return LifecycleResult.failure(
                    BadRequestException(
                        f"Provider '{provider_name}' expects two tokens joined by "
                        f"'{self.credential_separator}'",
                        field="token",
                    )
                )
            credentials = (pair.token, pair.secret)

        lookup = TenantEntity.from_identifier(tenant_id.strip())
        if not lookup.id:
            return LifecycleResult.failure(BadRequestException(MISSING_ISSUE_FIELDS))

        user = await adapter.get_or_create_user(lookup.namespace, *credentials)
        if user is None or not user.active:
            logger.info("Authentication via %s failed for %s", provider_name, lookup.id)
            return LifecycleResult.failure(
                AuthenticationException(
                    f"Failed to authenticate user with '{provider_name}'."
                )
            )

        tenant = await self.tenants.read_by_identifier(lookup.id)
        if tenant is None or not tenant.active or not tenant.id:
            return LifecycleResult.failure(TenantNotFoundException(lookup.id))

        now_s = self.clock() // 1000
        claims = self.codec.build_claims(
            user.id, tenant.id, now_s, self.session_timeout_seconds
        )
        signed = self.codec.sign(claims, tenant.secret)
        if signed is None:
            return LifecycleResult.failure(SigningFailureException())

        if user.revoke_tokens_at is not None:
            user.revoke_tokens_at = None
            await self.store.overwrite(tenant.namespace, user)

        logger.info("Issued session token for user %s in %s", user.id, tenant.id)
        return LifecycleResult(
            user=user,
            token=IssuedToken(signed, claims),
            state=TokenState.VALID,
        )

    async def refresh(self, token: str | None) -> LifecycleResult:
        """Return the same token while valid, or a reissued one once expired.

        Revoked and invalid tokens are rejected; those need a fresh issue.
        """
        if not token:
            return LifecycleResult.failure(_missing_token())
        resolved = await self._resolve(token)
        if resolved.state is TokenState.VALID:
            return LifecycleResult(
                user=resolved.user,
                token=IssuedToken(token, resolved.claims),
                state=resolved.state,
            )
        if resolved.state is not TokenState.EXPIRED:
            return LifecycleResult.failure(UnauthorizedException(), resolved.state)

        now_s = self.clock() // 1000
        claims = resolved.claims.renewed(now_s, self.session_timeout_seconds)
        signed = self.codec.sign(claims, resolved.tenant.secret)
        if signed is None:
            return LifecycleResult.failure(SigningFailureException(), resolved.state)
        logger.info(
            "Reissued expired token for user %s in %s", resolved.user.id, resolved.tenant.id
        )
        return LifecycleResult(
            user=resolved.user,
            token=IssuedToken(signed, claims),
            state=resolved.state,
        )

    async def revoke(
        self, token: str | None, revoke_tokens_at: int | None = None
    ) -> LifecycleResult:
        """Revoke every token of the user issued before revoke_tokens_at (default now).

        The presented token must still carry a valid signature; it may be
        expired. It is revoked as well when it predates the stamp.
        A stamp that cannot be represented as a date is rejected before
        anything is written.
        """
        if not token:
            return LifecycleResult.failure(_missing_token())
        resolved = await self._resolve(token)
        if resolved.state not in (TokenState.VALID, TokenState.EXPIRED):
            return LifecycleResult.failure(
                UnauthorizedException(
                    "Invalid or expired token.", challenge=BEARER_CHALLENGE
                ),
                resolved.state,
            )

        stamp = revoke_tokens_at if revoke_tokens_at and revoke_tokens_at > 0 else self.clock()
        try:
            revoked_from = from_timestamp_ms_utc(stamp)
        except (OverflowError, OSError, ValueError):
            return LifecycleResult.failure(
                BadRequestException(
                    f"{REVOKE_AT_FIELD} is not a representable epoch-millis timestamp.",
                    field=REVOKE_AT_FIELD,
                ),
                resolved.state,
            )
        user = resolved.user
        user.revoke_tokens_at = stamp
        await self.store.overwrite(resolved.tenant.namespace, user)
        logger.info("Revoked tokens of user %s in %s at %s", user.id, resolved.tenant.id, stamp)
        return LifecycleResult(
            user=user,
            state=resolved.state,
            revoke_tokens_at=stamp,
            message=f"All tokens will be revoked at {revoked_from.isoformat()}",
        )

    async def authenticate(self, token: str | None) -> LifecycleResult:
        """Passive check: succeed only for a currently VALID token."""
        if not token:
            return LifecycleResult.failure(_missing_token())
        resolved = await self._resolve(token)
        if resolved.state is not TokenState.VALID:
            return LifecycleResult.failure(UnauthorizedException(), resolved.state)
        return LifecycleResult(
            user=resolved.user,
            token=IssuedToken(token, resolved.claims),
            state=resolved.state,
        )

    async def evaluate(self, token: str | None) -> TokenState:
        """Return the current state of a presented token."""
        if not token:
            return TokenState.INVALID
        return (await self._resolve(token)).state

    async def _resolve(self, token: str) -> _Resolution:
        claims = self.codec.parse(token)
        if claims is None:
            return _Resolution(TokenState.INVALID)
        tenant = await self.tenants.read_by_identifier(claims.tenant_id)
        if tenant is None or not tenant.active or not tenant.namespace:
            logger.debug("Token names unknown or inactive tenant %s", claims.tenant_id)
            return _Resolution(TokenState.INVALID, claims)
        if not self.codec.verify_signature(token, tenant.secret):
            return _Resolution(TokenState.INVALID, claims)
        user = await self.store.read(tenant.namespace, claims.subject)
        if not isinstance(user, UserEntity) or not user.active:
            logger.debug("Token subject %s not found in %s", claims.subject, tenant.id)
            return _Resolution(TokenState.INVALID, claims)
        state = evaluate_token_state(
            claims,
            True,
            user.revoke_tokens_at,
            self.clock(),
            check_not_before=self.check_not_before,
        )
        return _Resolution(state, claims, tenant, user)
