"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"
    assert data.get("version")


async def test_response_carries_generated_request_id(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.headers.get("X-Request-ID")


async def test_valid_request_id_is_forwarded(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "abc-123_x"})
    assert response.headers["X-Request-ID"] == "abc-123_x"


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    """Client ids with characters outside [A-Za-z0-9_-] are not echoed into logs."""
    response = await client.get(
        "/api/v1/health", headers={"X-Request-ID": "bad id\r\ninjected"}
    )
    assert response.headers["X-Request-ID"] != "bad id\r\ninjected"
    assert len(response.headers["X-Request-ID"]) == 36
