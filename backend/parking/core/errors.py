"""Typed failures raised by the reservation core."""

from __future__ import annotations

from datetime import date


class BookingError(Exception):
    """Base class for business-rule failures reported back to the caller."""

    kind = "booking_error"
    status_code = 400
    default_message = "Unable to process booking"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRange(BookingError, ValueError):
    """The requested window ends at or before the start of its first day."""

    kind = "invalid_range"
    status_code = 422
    default_message = "The end date/time must be after the start date."


class CapacityExceeded(BookingError):
    """A day in the requested window has no space left."""

    kind = "capacity_exceeded"
    status_code = 409

    def __init__(self, day: date) -> None:
        self.day = day
        super().__init__(f"No spaces available on {day.isoformat()}")


class DuplicateSubmission(BookingError):
    kind = "duplicate_submission"
    status_code = 409
    default_message = "This booking has already been submitted."


class VehicleOverlap(BookingError):
    kind = "vehicle_overlap"
    status_code = 409
    default_message = (
        "This vehicle already has an active booking that overlaps with these dates. "
        "Choose a different vehicle or cancel the existing one."
    )


class AlreadyCancelled(BookingError):
    kind = "already_cancelled"
    status_code = 409
    default_message = "This booking is already cancelled."


class BookingNotActive(BookingError):
    kind = "booking_not_active"
    status_code = 422
    default_message = "Cannot amend a cancelled booking."


class VersionConflict(BookingError):
    """The client amended from a stale copy of the booking."""

    kind = "version_conflict"
    status_code = 409

    def __init__(self, expected: int, current: int) -> None:
        self.expected = expected
        self.current = current
        super().__init__(
            f"Booking version mismatch: expected {expected}, current is {current}"
        )


class TransientStoreError(RuntimeError):
    """Lock wait timeout, deadlock or dropped connection; safe to retry."""


class PricingConfigError(ValueError):
    """Raised when the rate table cannot price every resolvable day."""


__all__ = [
    "AlreadyCancelled",
    "BookingError",
    "BookingNotActive",
    "CapacityExceeded",
    "DuplicateSubmission",
    "InvalidRange",
    "PricingConfigError",
    "TransientStoreError",
    "VehicleOverlap",
    "VersionConflict",
]
