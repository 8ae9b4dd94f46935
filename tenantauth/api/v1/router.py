"""API v1 router aggregation.

The session token management endpoint is not a route: the JWT filter
answers it before routing (see tenantauth.middleware.jwt_auth).
"""

from fastapi import APIRouter

from tenantauth.api.v1.endpoints import apps, health, me

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(apps.router, prefix="/apps", tags=["apps"])
api_router.include_router(me.router, prefix="/me", tags=["me"])
