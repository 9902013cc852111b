"""Availability API tests."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _book(client: AsyncClient, index: int, from_date: str, to_datetime: str) -> None:
    response = await client.post(
        "/api/v1/bookings",
        json={
            "customer_name": f"Driver {index}",
            "customer_email": f"driver{index}@example.com",
            "vehicle_reg": f"CAR {index:03d}",
            "from_date": from_date,
            "to_datetime": to_datetime,
        },
    )
    assert response.status_code == 201, response.text


async def test_calendar_reflects_active_bookings(client: AsyncClient) -> None:
    await _book(client, 1, "2025-08-11", "2025-08-12T09:00:00")
    await _book(client, 2, "2025-08-10", "2025-08-12T09:00:00")

    response = await client.get(
        "/api/v1/availability",
        params={"from_date": "2025-08-10", "to_datetime": "2025-08-13T12:00:00"},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["range"] == {
        "from_date": "2025-08-10",
        "to_datetime": "2025-08-13T12:00:00+00:00",
    }
    assert payload["all_days_have_space"] is False
    assert payload["per_day"] == [
        {"date": "2025-08-10", "capacity": 2, "booked": 1, "available": 1},
        {"date": "2025-08-11", "capacity": 2, "booked": 2, "available": 0},
        {"date": "2025-08-12", "capacity": 2, "booked": 0, "available": 2},
    ]


async def test_calendar_of_same_day_pickup_is_empty(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/availability",
        params={"from_date": "2025-08-10", "to_datetime": "2025-08-10T18:00:00"},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["per_day"] == []
    assert payload["all_days_have_space"] is True


async def test_calendar_rejects_invalid_window(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/availability",
        params={"from_date": "2025-08-10", "to_datetime": "2025-08-10T00:00:00"},
    )
    assert response.status_code == 422
