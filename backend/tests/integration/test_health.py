"""Tests for the health check endpoint."""

import pytest
from httpx import ASGITransport, AsyncClient

from eazyliens.main import app


@pytest.mark.asyncio
async def test_health_check_returns_200():
    """Health endpoint should return 200 with status, version, and environment."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert "environment" in data
    assert data["change_subscribers"] == 0


def test_change_stream_route_is_registered():
    paths = {route.path for route in app.routes}
    assert "/api/v1/changes/stream" in paths
    assert "/api/v1/records/{record_id}/cell-colors" in paths
