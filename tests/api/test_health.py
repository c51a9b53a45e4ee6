"""Smoke tests for health and app wiring."""

from httpx import AsyncClient

from app.application.services.permission_snapshot import PermissionSnapshotStore
from app.main import app


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_ready_reports_published_snapshot(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["snapshot_version"] == 1
    assert data["permissions"] == 8


async def test_ready_degraded_before_first_load(client: AsyncClient) -> None:
    """Version 0 means nothing was loaded and every check denies."""
    app.state.permission_snapshot_store = PermissionSnapshotStore()
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers.get("x-request-id") == "abc-123"


async def test_request_id_generated_for_unsafe_value(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/health", headers={"X-Request-ID": "bad id; drop"}
    )
    request_id = response.headers.get("x-request-id")
    assert request_id
    assert request_id != "bad id; drop"
