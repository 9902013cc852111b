"""Tests for the capacity ledger."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from parking.core.errors import CapacityExceeded
from parking.domain import DateRange
from parking.models import Capacity
from parking.repositories import SqlAlchemyBookingStore
from parking.services import AvailabilityService

pytestmark = pytest.mark.asyncio


def _window(first: date, pickup: datetime) -> DateRange:
    return DateRange(first, pickup)


async def test_calendar_uses_default_capacity_and_creates_nothing(
    store: SqlAlchemyBookingStore,
) -> None:
    service = AvailabilityService(default_capacity=5)
    calendar = await service.calendar(
        store, _window(date(2025, 8, 10), datetime(2025, 8, 12, 9, tzinfo=UTC))
    )
    assert [day.to_dict() for day in calendar] == [
        {"date": "2025-08-10", "capacity": 5, "booked": 0, "available": 5},
        {"date": "2025-08-11", "capacity": 5, "booked": 0, "available": 5},
    ]
    assert await store.capacity_overrides([date(2025, 8, 10), date(2025, 8, 11)]) == {}


async def test_calendar_prefers_stored_capacity(store: SqlAlchemyBookingStore) -> None:
    store.session.add(Capacity(day=date(2025, 8, 11), capacity=1))
    await store.session.commit()

    service = AvailabilityService(default_capacity=5)
    calendar = await service.calendar(
        store, _window(date(2025, 8, 10), datetime(2025, 8, 12, 9, tzinfo=UTC))
    )
    assert [day.capacity for day in calendar] == [5, 1]


async def test_calendar_of_empty_window(store: SqlAlchemyBookingStore) -> None:
    service = AvailabilityService(default_capacity=5)
    calendar = await service.calendar(
        store, _window(date(2025, 8, 10), datetime(2025, 8, 10, 17, tzinfo=UTC))
    )
    assert calendar == []


async def test_assert_space_materialises_capacity_rows(store: SqlAlchemyBookingStore) -> None:
    service = AvailabilityService(default_capacity=3)
    window = _window(date(2025, 8, 10), datetime(2025, 8, 13, tzinfo=UTC))
    async with store.atomic():
        await service.assert_range_has_space(store, window)

    overrides = await store.capacity_overrides(list(window.occupied_days()))
    assert overrides == {
        date(2025, 8, 10): 3,
        date(2025, 8, 11): 3,
        date(2025, 8, 12): 3,
    }


async def test_assert_space_keeps_existing_capacity(store: SqlAlchemyBookingStore) -> None:
    store.session.add(Capacity(day=date(2025, 8, 10), capacity=7))
    await store.session.commit()

    service = AvailabilityService(default_capacity=3)
    async with store.atomic():
        await service.assert_range_has_space(
            store, _window(date(2025, 8, 10), datetime(2025, 8, 11, tzinfo=UTC))
        )
    assert await store.capacity_overrides([date(2025, 8, 10)]) == {date(2025, 8, 10): 7}


async def test_zero_capacity_day_is_reported(store: SqlAlchemyBookingStore) -> None:
    store.session.add(Capacity(day=date(2025, 8, 11), capacity=0))
    await store.session.commit()

    service = AvailabilityService(default_capacity=3)
    with pytest.raises(CapacityExceeded) as excinfo:
        async with store.atomic():
            await service.assert_range_has_space(
                store, _window(date(2025, 8, 10), datetime(2025, 8, 13, tzinfo=UTC))
            )
    assert excinfo.value.day == date(2025, 8, 11)
    assert excinfo.value.message == "No spaces available on 2025-08-11"


async def test_negative_default_capacity_is_rejected() -> None:
    with pytest.raises(ValueError):
        AvailabilityService(default_capacity=-1)
