"""SQLAlchemy implementation of the booking store."""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager
from datetime import date, datetime

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from parking.core.errors import TransientStoreError
from parking.models import Booking, BookingDay, BookingStatus, Capacity
from parking.repositories.base import BookingStore

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected, lock_not_available, query_canceled
_TRANSIENT_SQLSTATES = {"40001", "40P01", "55P03", "57014"}


def is_transient(exc: DBAPIError) -> bool:
    """Whether a driver error is a lock/contention failure worth retrying."""
    if isinstance(exc, IntegrityError):
        return False
    if isinstance(exc, OperationalError):
        return True
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return sqlstate in _TRANSIENT_SQLSTATES


class SqlAlchemyBookingStore(BookingStore):
    """Booking store backed by an ``AsyncSession``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        try:
            yield
            await self._session.commit()
        except DBAPIError as exc:
            await self._session.rollback()
            if is_transient(exc):
                logger.warning("Transient store failure, transaction rolled back: %s", exc.orig)
                raise TransientStoreError(str(exc.orig)) from exc
            raise
        except BaseException:
            await self._session.rollback()
            raise

    async def capacity_overrides(self, days: Sequence[date]) -> dict[date, int]:
        if not days:
            return {}
        result = await self._session.execute(
            select(Capacity.day, Capacity.capacity).where(Capacity.day.in_(days))
        )
        return {day: capacity for day, capacity in result.all()}

    async def active_counts(self, days: Sequence[date]) -> dict[date, int]:
        if not days:
            return {}
        result = await self._session.execute(
            select(BookingDay.day, func.count())
            .join(Booking, Booking.id == BookingDay.booking_id)
            .where(
                BookingDay.day.in_(days),
                Booking.status == BookingStatus.ACTIVE,
            )
            .group_by(BookingDay.day)
        )
        return {day: int(count) for day, count in result.all()}

    async def ensure_capacity_row(self, day: date, default: int) -> None:
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = postgresql.insert(Capacity).values(day=day, capacity=default)
        elif dialect == "sqlite":
            stmt = sqlite.insert(Capacity).values(day=day, capacity=default)
        else:
            existing = await self._session.get(Capacity, day)
            if existing is None:
                await self._session.execute(
                    insert(Capacity).values(day=day, capacity=default)
                )
            return
        await self._session.execute(
            stmt.on_conflict_do_nothing(index_elements=[Capacity.day])
        )

    async def lock_capacity(self, day: date) -> int:
        result = await self._session.execute(
            select(Capacity.capacity).where(Capacity.day == day).with_for_update()
        )
        return int(result.scalar_one())

    async def lock_active_occupancy(
        self, day: date, *, exclude_booking_id: uuid.UUID | None = None
    ) -> int:
        stmt = (
            select(BookingDay.id)
            .join(Booking, Booking.id == BookingDay.booking_id)
            .where(
                BookingDay.day == day,
                Booking.status == BookingStatus.ACTIVE,
            )
            .with_for_update(of=BookingDay)
        )
        if exclude_booking_id is not None:
            stmt = stmt.where(BookingDay.booking_id != exclude_booking_id)
        result = await self._session.execute(stmt)
        return len(result.scalars().all())

    async def find_by_fingerprint(self, fingerprint: str) -> Booking | None:
        result = await self._session.execute(
            select(Booking).where(Booking.idempotency_fingerprint == fingerprint)
        )
        return result.scalars().first()

    async def find_active_vehicle_bookings(
        self,
        vehicle_reg_normalized: str,
        *,
        ending_after: datetime,
        starting_on_or_before: date,
        exclude_booking_id: uuid.UUID | None = None,
    ) -> list[Booking]:
        stmt = select(Booking).where(
            Booking.vehicle_reg_normalized == vehicle_reg_normalized,
            Booking.status == BookingStatus.ACTIVE,
            Booking.to_moment > ending_after,
            Booking.from_date <= starting_on_or_before,
        )
        if exclude_booking_id is not None:
            stmt = stmt.where(Booking.id != exclude_booking_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def add_booking(self, booking: Booking) -> Booking:
        self._session.add(booking)
        await self._session.flush()
        return booking

    async def lock_booking(self, booking_id: uuid.UUID) -> Booking | None:
        if self._session.get_bind().dialect.name != "postgresql":
            # No row locks here: a no-op write takes the database write lock
            # so the read below sees the last committed state.
            await self._session.execute(
                update(Booking)
                .where(Booking.id == booking_id)
                .values(version=Booking.version, updated_at=Booking.updated_at)
                .execution_options(synchronize_session=False)
            )
        result = await self._session.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalars().one_or_none()

    async def bump_version(self, booking: Booking) -> None:
        await self._session.execute(
            update(Booking)
            .where(Booking.id == booking.id)
            .values(version=Booking.version + 1)
            .execution_options(synchronize_session=False)
        )

    async def replace_days(self, booking_id: uuid.UUID, days: Iterable[date]) -> None:
        await self._session.execute(
            delete(BookingDay).where(BookingDay.booking_id == booking_id)
        )
        rows = [{"booking_id": booking_id, "day": day} for day in days]
        if rows:
            await self._session.execute(insert(BookingDay), rows)

    async def get_booking(self, booking_id: uuid.UUID) -> Booking | None:
        result = await self._session.execute(
            select(Booking)
            .options(selectinload(Booking.days))
            .where(Booking.id == booking_id)
        )
        return result.scalars().one_or_none()

    async def get_booking_by_reference(self, reference: str) -> Booking | None:
        result = await self._session.execute(
            select(Booking)
            .options(selectinload(Booking.days))
            .where(Booking.reference == reference)
        )
        return result.scalars().one_or_none()

    async def reload(self, booking_id: uuid.UUID) -> Booking:
        result = await self._session.execute(
            select(Booking)
            .options(selectinload(Booking.days))
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().one()
