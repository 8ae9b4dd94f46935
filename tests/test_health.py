"""Smoke tests for health and app wiring."""

from httpx import AsyncClient

from tenantauth.api.v1.dependencies import AuthContainer
from tenantauth.main import create_app


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"


async def test_responses_carry_request_id_and_security_headers(client: AsyncClient) -> None:
    """Request ID is forwarded and security headers are added."""
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Cache-Control"] == "no-store"


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    """A request id with unsafe characters is replaced by a generated one."""
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "bad id!"})
    assert response.headers["X-Request-ID"] != "bad id!"
    assert len(response.headers["X-Request-ID"]) == 36


async def test_lifespan_closes_provider_http_client(container: AuthContainer) -> None:
    """Shutdown closes the shared identity provider HTTP client."""
    app = create_app(container)
    async with app.router.lifespan_context(app):
        assert not container.http_client.is_closed
    assert container.http_client.is_closed
