"""Session token filter: management endpoint plus passive authentication.

On the management path the filter answers the request itself:
POST issues a token, GET refreshes one and DELETE revokes a user's tokens.
Every other request under the protected prefix that carries no principal
yet is authenticated passively. A valid bearer token attaches a Principal
to request.state and the request context. A missing or bad token only adds
a WWW-Authenticate challenge. The request always continues, so authorization
decides what anonymous callers may do.
"""

from __future__ import annotations

from typing import Callable

from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from tenantauth.application.dtos import LifecycleResult, Principal
from tenantauth.application.services import TokenLifecycleService
from tenantauth.core.config import Settings, get_settings
from tenantauth.core.constants import BEARER_CHALLENGE, INVALID_TOKEN_CHALLENGE
from tenantauth.core.exception_handlers import error_response
from tenantauth.domain.exceptions import BadRequestException, InternalErrorException
from tenantauth.schemas.auth import AuthResponse, RevokeResponse, TokenIssueRequest
from tenantauth.shared.context import clear_current_principal, set_current_principal
from tenantauth.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

REVOKE_AT_PARAM = "revokeTokensAt"
MANAGEMENT_METHODS = ("POST", "GET", "DELETE")


def extract_bearer_token(request: Request, query_param: str = "Authorization") -> str | None:
    """Return the bearer token from the Authorization header or query parameter.

    The header wins when both are present. Values not using the Bearer
    scheme are treated as absent.
    """
    raw = request.headers.get("Authorization")
    if raw is None:
        raw = request.query_params.get(query_param)
    if not raw:
        return None
    scheme, _, credentials = raw.strip().partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


def parse_revoke_at(raw: str | None) -> int | None:
    """Parse revokeTokensAt (epoch millis); None means 'now'."""
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value > 0 else None


def _normalize_path(path: str) -> str:
    return path.rstrip("/") or "/"


def _lifecycle(request: Request) -> TokenLifecycleService:
    return request.app.state.container.lifecycle


def JWTAuthMiddleware(app: Callable, settings: Settings | None = None) -> Callable:
    """Route management requests and passively authenticate protected ones."""
    resolved = settings or get_settings()
    management_path = _normalize_path(resolved.auth_management_path)
    protected_prefix = _normalize_path(resolved.protected_path_prefix)
    query_param = resolved.token_query_param

    def is_protected(path: str) -> bool:
        return path == protected_prefix or path.startswith(protected_prefix.rstrip("/") + "/")

    async def issue(request: Request) -> LifecycleResult:
        try:
            payload = await request.json()
        except ValueError:
            payload = {}
        try:
            body = TokenIssueRequest.model_validate(payload if isinstance(payload, dict) else {})
        except ValidationError:
            return LifecycleResult.failure(
                BadRequestException("Fields 'provider', 'appid' and 'token' must be strings.")
            )
        return await _lifecycle(request).issue(body.provider, body.appid, body.token)

    async def manage(request: Request) -> Response:
        method = request.method.upper()
        if method not in MANAGEMENT_METHODS:
            return JSONResponse(
                status_code=405,
                content={"code": 405, "error": "METHOD_NOT_ALLOWED", "message": "Method not allowed"},
                headers={"Allow": ", ".join(MANAGEMENT_METHODS)},
            )
        token = extract_bearer_token(request, query_param)
        try:
            if method == "POST":
                result = await issue(request)
            elif method == "GET":
                result = await _lifecycle(request).refresh(token)
            else:
                result = await _lifecycle(request).revoke(
                    token, parse_revoke_at(request.query_params.get(REVOKE_AT_PARAM))
                )
        except Exception:
            logger.exception("Token %s request failed", method)
            return error_response(InternalErrorException())

        if not result.ok:
            logger.debug("Token %s rejected: %s", method, result.error.error_code)
            return error_response(result.error)
        if method == "DELETE":
            return JSONResponse(
                RevokeResponse(
                    message=result.message or "",
                    revoke_tokens_at=result.revoke_tokens_at or 0,
                ).model_dump()
            )
        return JSONResponse(AuthResponse.from_result(result).model_dump())

    async def authenticate(request: Request) -> str | None:
        """Attach a principal for a valid token; return the challenge to send otherwise."""
        token = extract_bearer_token(request, query_param)
        if token is None:
            return BEARER_CHALLENGE
        try:
            result = await _lifecycle(request).authenticate(token)
        except Exception:
            logger.exception("Passive authentication failed")
            return INVALID_TOKEN_CHALLENGE
        if not result.ok:
            logger.debug("Bearer token rejected (%s)", result.state)
            return INVALID_TOKEN_CHALLENGE
        claims = result.token.claims
        principal = Principal(user=result.user, tenant_id=claims.tenant_id, claims=claims)
        request.state.principal = principal
        set_current_principal(principal)
        return None

    class _Middleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next: Callable) -> Response:
            path = _normalize_path(request.url.path)
            if path == management_path:
                return await manage(request)
            if not is_protected(path) or getattr(request.state, "principal", None) is not None:
                return await call_next(request)

            challenge = await authenticate(request)
            request.state.auth_challenge = challenge
            try:
                response = await call_next(request)
            finally:
                clear_current_principal()
            if challenge is not None:
                response.headers.setdefault("WWW-Authenticate", challenge)
            return response

    return _Middleware(app)
