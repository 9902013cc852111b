"""Per-day capacity ledger: display calendar and write-path enforcement."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any

from parking.core.errors import CapacityExceeded
from parking.domain.date_range import DateRange
from parking.repositories.base import BookingStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DayAvailability:
    """Availability summary for a single day."""

    date: date
    capacity: int
    booked: int
    available: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "capacity": self.capacity,
            "booked": self.booked,
            "available": self.available,
        }


class AvailabilityService:
    """Counts active occupancy against per-day capacity."""

    def __init__(self, default_capacity: int) -> None:
        if default_capacity < 0:
            raise ValueError("default_capacity must be non-negative")
        self.default_capacity = default_capacity

    async def calendar(
        self, store: BookingStore, date_range: DateRange
    ) -> list[DayAvailability]:
        """Return a point-in-time snapshot per occupied day.

        Takes no locks. The result is for display only and must never be
        used to decide whether a write may proceed.
        """
        days = list(date_range.occupied_days())
        if not days:
            return []
        overrides = await store.capacity_overrides(days)
        counts = await store.active_counts(days)

        calendar: list[DayAvailability] = []
        for day in days:
            capacity = overrides.get(day, self.default_capacity)
            booked = counts.get(day, 0)
            calendar.append(
                DayAvailability(
                    date=day,
                    capacity=capacity,
                    booked=booked,
                    available=max(0, capacity - booked),
                )
            )
        return calendar

    async def assert_range_has_space(
        self,
        store: BookingStore,
        date_range: DateRange,
        *,
        ignore_booking_id: uuid.UUID | None = None,
    ) -> None:
        """Raise ``CapacityExceeded`` unless every day has room for one more.

        Must run inside the caller's write transaction so the locks taken
        here are held until the new occupancy rows are committed. Days are
        locked in ascending order for every caller, so two writers touching
        overlapping ranges always queue on the same first row.
        """
        for day in sorted(set(date_range.occupied_days())):
            await store.ensure_capacity_row(day, self.default_capacity)
            capacity = await store.lock_capacity(day)
            booked = await store.lock_active_occupancy(
                day, exclude_booking_id=ignore_booking_id
            )
            if booked >= capacity:
                logger.warning(
                    "Capacity exhausted on %s (%s/%s booked)", day, booked, capacity
                )
                raise CapacityExceeded(day)
