"""Domain exceptions for tenantauth.

Defines the error kinds of the authentication core. The token lifecycle
controller returns them as typed results; routes raise them. Either way
the presentation layer maps error_code to an HTTP status in one table
(tenantauth.core.exception_handlers).
"""

from typing import Any

from tenantauth.core.constants import INVALID_TOKEN_CHALLENGE


class TenantAuthException(Exception):
    """Base exception for all tenantauth errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, tenant_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used in error responses (without status code)."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(TenantAuthException):
    """Raised when an entity fails its own invariants (e.g. blank tenant name)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class BadRequestException(TenantAuthException):
    """Missing or malformed required fields, or an unrecognized provider."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "BAD_REQUEST", details)


class AuthenticationException(TenantAuthException):
    """Provider rejected the external token, or no local user could be resolved."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class UnauthorizedException(TenantAuthException):
    """Bearer token invalid, revoked, or otherwise unusable.

    Attributes:
        challenge: Value for the WWW-Authenticate response header.
    """

    def __init__(
        self,
        message: str = "User must reauthenticate.",
        challenge: str = INVALID_TOKEN_CHALLENGE,
    ) -> None:
        super().__init__(message, "UNAUTHORIZED")
        self.challenge = challenge


class TenantNotFoundException(TenantAuthException):
    """Raised when a requested tenant is not found."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            f"Tenant not found: {tenant_id}",
            "TENANT_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class UserNotFoundException(TenantAuthException):
    """Raised when a user cannot be found in its tenant namespace."""

    def __init__(self, user_id: str, namespace: str) -> None:
        super().__init__(
            f"User not found: {user_id}",
            "USER_NOT_FOUND",
            {"user_id": user_id, "namespace": namespace},
        )


class TenantAlreadyExistsException(TenantAuthException):
    """Raised when registering a tenant whose identifier already exists."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            f"Tenant '{tenant_id}' already exists",
            "TENANT_ALREADY_EXISTS",
            {"tenant_id": tenant_id},
        )


class SigningFailureException(TenantAuthException):
    """The token signer failed (missing claims/secret or cryptographic fault)."""

    def __init__(self, message: str = "Unable to sign token") -> None:
        super().__init__(message, "SIGNING_FAILURE")


class InternalErrorException(TenantAuthException):
    """Serialization or store failure unrelated to the caller's input."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, "INTERNAL_ERROR")
