"""Health endpoint tests."""

import pytest
from sqlalchemy.exc import OperationalError

from eventdesk.db.engine import get_db
from eventdesk.main import app


@pytest.mark.asyncio
async def test_health_returns_ok(unauthenticated_client):
    """Health endpoint should return server status, version and database state."""
    resp = await unauthenticated_client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_ignores_api_keys(unauthenticated_client):
    """/health sits outside /api, so even a bogus key is never checked."""
    resp = await unauthenticated_client.get("/health", headers={"X-API-Key": "ed_bogus"})
    assert resp.status_code == 200


class _UnreachableDatabase:
    async def execute(self, *args, **kwargs):
        raise OperationalError(
            "SELECT 1", {}, Exception('password authentication failed for user "eventdesk"')
        )


@pytest.mark.asyncio
async def test_health_degraded_hides_database_detail(unauthenticated_client):
    """A failing database is reported, but its error text stays in the logs."""
    async def broken_db():
        yield _UnreachableDatabase()

    app.dependency_overrides[get_db] = broken_db

    resp = await unauthenticated_client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "degraded"
    assert data["database"] == "error"
    assert "password" not in resp.text
