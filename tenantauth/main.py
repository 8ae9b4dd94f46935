"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
No business logic here. See tenantauth.core.lifespan and
tenantauth.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tenantauth.api.v1 import api_router
from tenantauth.api.v1.dependencies import AuthContainer, build_container
from tenantauth.core.config import get_settings
from tenantauth.core.exception_handlers import register_exception_handlers
from tenantauth.core.lifespan import create_lifespan
from tenantauth.middleware import (
    JWTAuthMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
)
from tenantauth.shared.telemetry.logging import setup_logging


def create_app(container: AuthContainer | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        container: Pre-wired collaborators (tests); built from settings when None.
    """
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.container = container or build_container(settings)

    register_exception_handlers(app)

    # Middleware: last added = outermost. Order: request ID -> security -> CORS -> JWT filter.
    app.add_middleware(JWTAuthMiddleware, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["WWW-Authenticate", settings.request_id_header],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
