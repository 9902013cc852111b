"""Pydantic schemas for bookings."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from parking.models.booking import Booking, BookingStatus

VEHICLE_REG_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9\-\s]*$"


class BookingWindow(BaseModel):
    """Drop-off day and pick-up moment."""

    from_date: date
    to_datetime: datetime


class BookingCreate(BookingWindow):
    """Payload for creating bookings."""

    customer_name: str = Field(min_length=1, max_length=120)
    customer_email: EmailStr = Field(max_length=120)
    vehicle_reg: str = Field(min_length=1, max_length=20, pattern=VEHICLE_REG_PATTERN)


class BookingAmend(BookingWindow):
    """Payload for amending an active booking."""

    customer_name: str | None = Field(default=None, min_length=1, max_length=120)
    customer_email: EmailStr | None = Field(default=None, max_length=120)
    vehicle_reg: str | None = Field(
        default=None, min_length=1, max_length=20, pattern=VEHICLE_REG_PATTERN
    )
    expected_version: int | None = Field(default=None, ge=1)


class BookingRead(BaseModel):
    """Serialized booking representation."""

    id: uuid.UUID
    reference: str
    status: BookingStatus
    customer_name: str
    customer_email: str
    vehicle_reg: str
    from_date: date
    to_datetime: datetime
    total_minor: int
    total: str
    currency: str
    version: int
    days: list[date] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_booking(cls, booking: Booking, tz: Any) -> BookingRead:
        return cls(
            id=booking.id,
            reference=booking.reference,
            status=booking.status,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            vehicle_reg=booking.vehicle_reg,
            from_date=booking.from_date,
            to_datetime=booking.to_moment.astimezone(tz),
            total_minor=booking.total_minor,
            total=str(booking.total),
            currency=booking.currency,
            version=booking.version,
            days=[row.day for row in booking.days],
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class BookingCancelled(BaseModel):
    """Response returned after a cancellation."""

    booking: BookingRead
    message: str = "Booking cancelled"
    reference: str
