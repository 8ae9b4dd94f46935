"""Session token codec: build, sign, verify and parse JWT claim sets.

Signing uses a symmetric MAC keyed by the owning tenant's secret, so a
token minted for one tenant never verifies under another tenant's key.
Verification here checks the MAC only; time-based claims are judged by
tenantauth.application.services.token_state.

Failures are reported as None/False and logged, never raised.
"""

from typing import Any

from jose import JWTError, jwt

from tenantauth.application.dtos import TokenClaims
from tenantauth.core.constants import TENANT_CLAIM
from tenantauth.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_REGISTERED_CLAIMS = frozenset({"sub", "iat", "nbf", "exp", TENANT_CLAIM})

# Disable python-jose's time checks; signature is all verify_signature judges.
_SIGNATURE_ONLY = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "verify_at_hash": False,
}


class TokenCodec:
    """Signs and verifies session tokens with per-tenant secrets."""

    def __init__(self, algorithm: str = "HS256") -> None:
        self.algorithm = algorithm

    def build_claims(
        self,
        subject: str,
        tenant_id: str,
        issued_at: int,
        lifetime_seconds: int,
    ) -> TokenClaims:
        """Return a claim set with nbf = iat and exp = iat + lifetime."""
        return TokenClaims(
            subject=subject,
            tenant_id=tenant_id,
            issued_at=issued_at,
            not_before=issued_at,
            expires_at=issued_at + lifetime_seconds,
        )

    def sign(self, claims: TokenClaims | None, secret: str | None) -> str | None:
        """Sign claims with secret.

        Returns:
            The compact token, or None if claims/secret are missing or the
            signer failed.
        """
        if claims is None or not claims.subject or not claims.tenant_id:
            logger.warning("Token signing skipped: claims are missing")
            return None
        if not secret:
            logger.warning("Token signing skipped: no secret for %s", claims.tenant_id)
            return None
        payload: dict[str, Any] = dict(claims.extra)
        payload.update(
            {
                "sub": claims.subject,
                TENANT_CLAIM: claims.tenant_id,
                "iat": claims.issued_at,
                "nbf": claims.not_before,
                "exp": claims.expires_at,
            }
        )
        try:
            return jwt.encode(payload, secret, algorithm=self.algorithm)
        except (JWTError, TypeError, ValueError) as e:
            logger.warning("Token signing failed for %s: %s", claims.tenant_id, e)
            return None

    def verify_signature(self, token: str | None, secret: str | None) -> bool:
        """Return True if the token's MAC verifies under secret.

        Expiry, not-before and issue time are not checked.
        """
        if not token or not secret:
            return False
        try:
            jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options=_SIGNATURE_ONLY,
            )
        except JWTError:
            return False
        return True

    def parse(self, token: str | None) -> TokenClaims | None:
        """Extract claims without verifying the signature.

        Returns None if the token is not well-formed or lacks subject,
        tenant, issue time or expiry.
        """
        if not token:
            return None
        try:
            payload = jwt.get_unverified_claims(token)
        except JWTError:
            return None
        subject = payload.get("sub")
        tenant_id = payload.get(TENANT_CLAIM)
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not subject or not tenant_id:
            return None
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            return None
        not_before = payload.get("nbf")
        extra = {k: v for k, v in payload.items() if k not in _REGISTERED_CLAIMS}
        return TokenClaims(
            subject=str(subject),
            tenant_id=str(tenant_id),
            issued_at=issued_at,
            not_before=not_before if isinstance(not_before, int) else issued_at,
            expires_at=expires_at,
            extra=extra,
        )
