"""Request context management using contextvars.

Holds the authenticated principal and the correlation id of the current
request so code below the HTTP layer can read them without threading the
request object through. The authentication filter sets the principal
(request.state.principal carries the same value for route handlers); the
request id middleware sets the correlation id.

Usage:
    set_current_principal(principal)
    principal = get_current_principal()
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tenantauth.application.dtos import Principal

_current_principal: ContextVar[Principal | None] = ContextVar(
    "current_principal", default=None
)


def set_current_principal(principal: Principal | None) -> None:
    """Set the authenticated principal for this request (scoped to the task)."""
    _current_principal.set(principal)


def clear_current_principal() -> None:
    """Clear the principal context."""
    _current_principal.set(None)


def get_current_principal() -> Principal | None:
    """Return the current principal, or None if not authenticated."""
    return _current_principal.get()


def get_current_tenant_id() -> str | None:
    """Return the tenant identifier of the current principal, if any."""
    principal = _current_principal.get()
    return principal.tenant_id if principal is not None else None


def get_current_user_id() -> str | None:
    """Return the user id of the current principal, if any."""
    principal = _current_principal.get()
    return principal.user_id if principal is not None else None

_current_request_id: ContextVar[str | None] = ContextVar("current_request_id", default=None)


def set_current_request_id(request_id: str | None) -> Token:
    """Publish the correlation id of the running request; returns the reset token."""
    return _current_request_id.set(request_id)


def reset_current_request_id(token: Token) -> None:
    _current_request_id.reset(token)


def get_current_request_id() -> str | None:
    """Return the correlation id of the running request, if any."""
    return _current_request_id.get()
