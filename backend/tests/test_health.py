"""Health endpoint smoke test."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_healthcheck_returns_ok(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["database"] == "ok"
    assert payload["service"] == "Parking Reservations API"
    assert "x-request-id" in response.headers


async def test_root_names_the_service(client: AsyncClient) -> None:
    response = await client.get("/")
    assert response.json() == {"message": "Parking Reservations API"}
