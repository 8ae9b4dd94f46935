"""Request correlation id.

Each HTTP request gets an id: the caller's X-Request-ID when it is a short
token of letters, digits, '-' or '_', otherwise a fresh UUID4. The id is
echoed on the response, kept on request.state and published to the
request context, where the log filter and error bodies pick it up.
"""

import re
import uuid
from typing import Callable

from tenantauth.shared.context import reset_current_request_id, set_current_request_id

_SAFE_REQUEST_ID = re.compile(r"[A-Za-z0-9_-]{1,64}")


def resolve_request_id(raw: bytes | None) -> str:
    """Return the caller's id if it is safe to log, else a new UUID4."""
    if raw:
        candidate = raw.decode("latin-1").strip()
        if _SAFE_REQUEST_ID.fullmatch(candidate):
            return candidate
    return str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Correlate request, response and log lines by one id. Raw ASGI."""
    header_key = header_name.lower().encode("latin-1")

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        supplied = dict(scope.get("headers") or []).get(header_key)
        request_id = resolve_request_id(supplied)
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_key, request_id.encode("latin-1")),
                ]
            await send(message)

        token = set_current_request_id(request_id)
        try:
            await app(scope, receive, send_with_id)
        finally:
            reset_current_request_id(token)

    return asgi_app
