"""Availability calendar schemas."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class DailyAvailability(BaseModel):
    """Availability summary for a single day."""

    date: date
    capacity: int
    booked: int
    available: int


class RangeEcho(BaseModel):
    from_date: date
    to_datetime: str


class AvailabilityResponse(BaseModel):
    """Availability response payload."""

    range: RangeEcho
    all_days_have_space: bool
    per_day: list[DailyAvailability]
