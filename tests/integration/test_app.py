"""Integration tests for app-level wiring."""

import pytest


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_id_generated_when_missing(client, admin_headers):
    response = await client.get("/api/locations/", headers=admin_headers)
    assert len(response.headers["X-Request-ID"]) == 32


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/nothing-here")

    assert response.status_code == 404
    body = response.json()
    assert body["path"] == "/api/nothing-here"
    assert body["error_code"] == "NOT_FOUND"
