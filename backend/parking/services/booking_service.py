"""Booking lifecycle: create, amend and cancel."""

from __future__ import annotations

import hashlib
import logging
import secrets
import uuid
from datetime import date, datetime, tzinfo

from sqlalchemy.exc import IntegrityError

from parking.core.errors import (
    AlreadyCancelled,
    BookingNotActive,
    DuplicateSubmission,
    VehicleOverlap,
    VersionConflict,
)
from parking.domain.date_range import DateRange
from parking.domain.normalization import display_text, normalize_email, normalize_reg
from parking.models import Booking, BookingStatus
from parking.repositories.base import BookingStore
from parking.security.redact import mask_email, mask_reg
from parking.services.availability_service import AvailabilityService
from parking.services.pricing_service import PricingService

logger = logging.getLogger(__name__)

_AMEND_OVERLAP_MESSAGE = "This amendment would overlap another booking for this vehicle."


def compute_fingerprint(
    email_normalized: str, reg_normalized: str, date_range: DateRange
) -> str:
    """Hash identifying a logically identical submission."""
    payload = "|".join(
        [
            email_normalized,
            reg_normalized,
            date_range.from_date.isoformat(),
            date_range.to_iso(),
        ]
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _is_fingerprint_violation(exc: IntegrityError) -> bool:
    return "idempotency_fingerprint" in str(exc.orig)


class BookingService:
    """Composes capacity, pricing and idempotency into atomic operations."""

    def __init__(
        self,
        availability: AvailabilityService,
        pricing: PricingService,
        *,
        tz: tzinfo,
        reference_prefix: str = "BK-",
    ) -> None:
        self.availability = availability
        self.pricing = pricing
        self.tz = tz
        self.reference_prefix = reference_prefix

    def build_range(self, from_date: date, to_datetime: datetime) -> DateRange:
        return DateRange.build(from_date, to_datetime, self.tz)

    def new_reference(self) -> str:
        return f"{self.reference_prefix}{secrets.token_hex(8).upper()}"

    async def get(self, store: BookingStore, booking_id: uuid.UUID) -> Booking | None:
        return await store.get_booking(booking_id)

    async def get_by_reference(self, store: BookingStore, reference: str) -> Booking | None:
        return await store.get_booking_by_reference(reference)

    async def create(
        self,
        store: BookingStore,
        *,
        customer_name: str,
        customer_email: str,
        vehicle_reg: str,
        from_date: date,
        to_datetime: datetime,
    ) -> Booking:
        date_range = self.build_range(from_date, to_datetime)

        email = normalize_email(customer_email)
        reg_normalized = normalize_reg(vehicle_reg)
        fingerprint = compute_fingerprint(email, reg_normalized, date_range)

        await self._ensure_not_submitted(store, fingerprint, email)
        await self._ensure_no_vehicle_overlap(store, reg_normalized, date_range)

        try:
            async with store.atomic():
                await self.availability.assert_range_has_space(store, date_range)
                # Re-checked under the day locks: a concurrent booking sharing a
                # day has committed by now.
                await self._ensure_not_submitted(store, fingerprint, email)
                await self._ensure_no_vehicle_overlap(store, reg_normalized, date_range)
                quote = self.pricing.quote(date_range)

                booking = Booking(
                    reference=self.new_reference(),
                    customer_name=display_text(customer_name),
                    customer_email=email,
                    vehicle_reg=display_text(vehicle_reg),
                    vehicle_reg_normalized=reg_normalized,
                    from_date=date_range.from_date,
                    to_moment=date_range.to_moment,
                    status=BookingStatus.ACTIVE,
                    total_minor=quote.total_minor,
                    currency=quote.currency,
                    version=1,
                    idempotency_fingerprint=fingerprint,
                )
                await store.add_booking(booking)
                await store.replace_days(booking.id, date_range.occupied_days())
                booking_id = booking.id
        except IntegrityError as exc:
            if _is_fingerprint_violation(exc):
                logger.warning(
                    "Concurrent duplicate submission rejected for %s", mask_email(email)
                )
                raise DuplicateSubmission() from exc
            raise

        logger.info(
            "Created booking %s (%s nights, %s minor %s)",
            booking.reference,
            date_range.night_count,
            quote.total_minor,
            quote.currency,
        )
        return await store.reload(booking_id)

    async def amend(
        self,
        store: BookingStore,
        booking: Booking,
        *,
        from_date: date,
        to_datetime: datetime,
        customer_name: str | None = None,
        customer_email: str | None = None,
        vehicle_reg: str | None = None,
        expected_version: int | None = None,
    ) -> Booking:
        # A cancelled booking never becomes active again, so a stale copy
        # is enough to reject early.
        if booking.status != BookingStatus.ACTIVE:
            raise BookingNotActive()

        date_range = self.build_range(from_date, to_datetime)
        booking_id = booking.id

        async with store.atomic():
            locked = await self._lock(store, booking_id)
            if locked.status != BookingStatus.ACTIVE:
                raise BookingNotActive()
            if expected_version is not None and expected_version != locked.version:
                raise VersionConflict(expected_version, locked.version)

            target_reg = vehicle_reg if vehicle_reg is not None else locked.vehicle_reg
            reg_normalized = normalize_reg(target_reg)

            await self.availability.assert_range_has_space(
                store, date_range, ignore_booking_id=booking_id
            )
            await self._ensure_no_vehicle_overlap(
                store,
                reg_normalized,
                date_range,
                exclude_booking_id=booking_id,
                message=_AMEND_OVERLAP_MESSAGE,
            )
            quote = self.pricing.quote(date_range)

            if customer_name is not None:
                locked.customer_name = display_text(customer_name)
            if customer_email is not None:
                locked.customer_email = normalize_email(customer_email)
            locked.vehicle_reg = display_text(target_reg)
            locked.vehicle_reg_normalized = reg_normalized
            locked.from_date = date_range.from_date
            locked.to_moment = date_range.to_moment
            locked.total_minor = quote.total_minor
            locked.currency = quote.currency
            await store.bump_version(locked)
            await store.replace_days(booking_id, date_range.occupied_days())

        amended = await store.reload(booking_id)
        logger.info(
            "Amended booking %s to version %s (%s minor %s)",
            amended.reference,
            amended.version,
            quote.total_minor,
            quote.currency,
        )
        return amended

    async def cancel(self, store: BookingStore, booking: Booking) -> Booking:
        """Cancel an active booking; its day rows are kept for history."""
        if booking.status == BookingStatus.CANCELLED:
            raise AlreadyCancelled()

        booking_id = booking.id
        async with store.atomic():
            locked = await self._lock(store, booking_id)
            if locked.status == BookingStatus.CANCELLED:
                raise AlreadyCancelled()
            locked.status = BookingStatus.CANCELLED
            locked.idempotency_fingerprint = None

        cancelled = await store.reload(booking_id)
        logger.info("Cancelled booking %s", cancelled.reference)
        return cancelled

    async def _lock(self, store: BookingStore, booking_id: uuid.UUID) -> Booking:
        locked = await store.lock_booking(booking_id)
        if locked is None:
            raise LookupError(f"Booking {booking_id} no longer exists")
        return locked

    async def _ensure_not_submitted(
        self, store: BookingStore, fingerprint: str, email: str
    ) -> None:
        if await store.find_by_fingerprint(fingerprint) is not None:
            logger.warning("Duplicate submission rejected for %s", mask_email(email))
            raise DuplicateSubmission()

    async def _ensure_no_vehicle_overlap(
        self,
        store: BookingStore,
        reg_normalized: str,
        date_range: DateRange,
        *,
        exclude_booking_id: uuid.UUID | None = None,
        message: str | None = None,
    ) -> None:
        candidates = await store.find_active_vehicle_bookings(
            reg_normalized,
            ending_after=date_range.start,
            starting_on_or_before=date_range.to_moment.date(),
            exclude_booking_id=exclude_booking_id,
        )
        for existing in candidates:
            existing_range = DateRange(existing.from_date, existing.to_moment, self.tz)
            if existing_range.overlaps(date_range):
                logger.warning(
                    "Vehicle %s overlaps booking %s",
                    mask_reg(reg_normalized),
                    existing.reference,
                )
                raise VehicleOverlap(message)
