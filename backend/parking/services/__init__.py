"""Reservation core services."""

from parking.services.availability_service import AvailabilityService, DayAvailability
from parking.services.booking_service import BookingService, compute_fingerprint
from parking.services.pricing_service import (
    DayType,
    PriceLine,
    PriceQuote,
    PricingConfig,
    PricingService,
)

__all__ = [
    "AvailabilityService",
    "BookingService",
    "DayAvailability",
    "DayType",
    "PriceLine",
    "PriceQuote",
    "PricingConfig",
    "PricingService",
    "compute_fingerprint",
]
