"""ORM models package export."""

from parking.models.booking import Booking, BookingDay, BookingStatus
from parking.models.capacity import Capacity

__all__ = [
    "Booking",
    "BookingDay",
    "BookingStatus",
    "Capacity",
]
