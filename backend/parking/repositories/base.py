"""Persistence gateway consumed by the reservation services."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from contextlib import AbstractAsyncContextManager
from datetime import date, datetime

from parking.models import Booking


class BookingStore(ABC):
    """Transactional store for capacity, bookings and occupancy rows.

    Implementations must provide row-level exclusive locks for the
    ``lock_*`` methods and surface unique-constraint violations from
    ``add_booking``/``atomic`` as catchable errors.
    """

    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """Commit on success, roll back on any exception.

        Lock timeouts and other retryable store failures are raised as
        ``TransientStoreError``.
        """

    # capacity ledger

    @abstractmethod
    async def capacity_overrides(self, days: Sequence[date]) -> dict[date, int]:
        """Return stored per-day capacity for the given days (no locks)."""

    @abstractmethod
    async def active_counts(self, days: Sequence[date]) -> dict[date, int]:
        """Count active occupancy rows per day (no locks)."""

    @abstractmethod
    async def ensure_capacity_row(self, day: date, default: int) -> None:
        """Insert a capacity row for ``day`` unless one already exists."""

    @abstractmethod
    async def lock_capacity(self, day: date) -> int:
        """Lock the capacity row for ``day`` and return its capacity."""

    @abstractmethod
    async def lock_active_occupancy(
        self, day: date, *, exclude_booking_id: uuid.UUID | None = None
    ) -> int:
        """Lock and count active occupancy rows for ``day``."""

    # bookings

    @abstractmethod
    async def find_by_fingerprint(self, fingerprint: str) -> Booking | None:
        ...

    @abstractmethod
    async def find_active_vehicle_bookings(
        self,
        vehicle_reg_normalized: str,
        *,
        ending_after: datetime,
        starting_on_or_before: date,
        exclude_booking_id: uuid.UUID | None = None,
    ) -> list[Booking]:
        """Active bookings for a vehicle whose stored window may intersect."""

    @abstractmethod
    async def add_booking(self, booking: Booking) -> Booking:
        ...

    @abstractmethod
    async def lock_booking(self, booking_id: uuid.UUID) -> Booking | None:
        """Exclusively lock the booking row and return its committed state.

        Must be the first statement of the write transaction that amends or
        cancels the booking.
        """

    @abstractmethod
    async def bump_version(self, booking: Booking) -> None:
        """Increment ``version`` in the store, relative to the stored value."""

    @abstractmethod
    async def replace_days(self, booking_id: uuid.UUID, days: Iterable[date]) -> None:
        """Delete every occupancy row of the booking, then insert ``days``."""

    @abstractmethod
    async def get_booking(self, booking_id: uuid.UUID) -> Booking | None:
        ...

    @abstractmethod
    async def get_booking_by_reference(self, reference: str) -> Booking | None:
        ...

    @abstractmethod
    async def reload(self, booking_id: uuid.UUID) -> Booking:
        """Fetch a fresh copy of the booking, bypassing the identity map."""
