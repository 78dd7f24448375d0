"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"
    assert data.get("version")


async def test_readiness_without_firestore_returns_503(client: AsyncClient) -> None:
    """GET /api/v1/health/ready is 503 when no Firestore client was initialized."""
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


async def test_dashboard_without_firestore_returns_503(client: AsyncClient) -> None:
    """Without credentials and no override, the fetcher dependency reports 503."""
    response = await client.get("/api/v1/dashboard")
    assert response.status_code == 503
    assert response.json()["error"] == "DATA_SOURCE_NOT_CONFIGURED"
