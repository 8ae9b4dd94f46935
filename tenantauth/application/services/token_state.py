"""Token state evaluation.

Validation is stateless: the only server-held state is the user's
revocation timestamp, so the state of a token is re-derived on every
request from (claims, signature check, revocation stamp, current time).
"""

from tenantauth.application.dtos import TokenClaims
from tenantauth.domain.enums import TokenState


def evaluate_token_state(
    claims: TokenClaims | None,
    signature_valid: bool,
    revoke_tokens_at: int | None,
    now_ms: int,
    *,
    check_not_before: bool = False,
) -> TokenState:
    """Classify a presented token.

    Order matters: an unverifiable token is INVALID before anything else is
    looked at, and revocation beats expiry so a revoked token can never be
    silently reissued.

    Args:
        claims: Parsed claims, or None if the token did not parse.
        signature_valid: Result of verifying the MAC under the tenant's
            current secret.
        revoke_tokens_at: User's revocation stamp in epoch millis, or None.
        now_ms: Current time in epoch millis.
        check_not_before: Treat a token used before its nbf as INVALID.
    """
    if claims is None or not signature_valid:
        return TokenState.INVALID
    if check_not_before and now_ms < claims.not_before * 1000:
        return TokenState.INVALID
    if revoke_tokens_at is not None and claims.issued_at_ms < revoke_tokens_at:
        return TokenState.REVOKED
    if now_ms >= claims.expires_at_ms:
        return TokenState.EXPIRED
    return TokenState.VALID
