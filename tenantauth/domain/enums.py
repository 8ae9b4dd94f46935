"""Domain enumerations for tenantauth."""

from enum import Enum


class TokenState(str, Enum):
    """State of a presented session token, derived fresh on every validation.

    VALID: signature verifies, not expired, not issued before the user's
        revocation timestamp.
    EXPIRED: signature verifies and not revoked, but past expiry; eligible
        for silent reissue.
    REVOKED: signature verifies but issued before the revocation timestamp.
    INVALID: unparseable token or signature mismatch (including a rotated
        tenant secret).
    """

    VALID = "valid"
    EXPIRED = "expired"
    REVOKED = "revoked"
    INVALID = "invalid"

    @property
    def is_signed(self) -> bool:
        """Return True when the signature checked out (any state but INVALID)."""
        return self is not TokenState.INVALID


class TenantIsolation(str, Enum):
    """How a tenant's data is separated from other tenants."""

    SHARED = "shared"
    DEDICATED = "dedicated"
