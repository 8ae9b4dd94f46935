"""HTTP middleware: request ID, security headers, session token filter.

Applied in main app; order matters (first added = outermost).
"""

from tenantauth.middleware.jwt_auth import JWTAuthMiddleware
from tenantauth.middleware.request_id import RequestIDMiddleware
from tenantauth.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "JWTAuthMiddleware",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
]
