"""Availability calendar API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from parking.api import deps
from parking.api.ranges import build_window
from parking.api.rate_limit import DEFAULT_RATE_DEP
from parking.repositories import BookingStore
from parking.schemas.availability import (
    AvailabilityResponse,
    DailyAvailability,
    RangeEcho,
)
from parking.services import AvailabilityService

router = APIRouter(dependencies=[DEFAULT_RATE_DEP])


@router.get(
    "",
    response_model=AvailabilityResponse,
    summary="Per-day availability for a stay",
)
async def get_availability(
    from_date: Annotated[date, Query()],
    to_datetime: Annotated[datetime, Query()],
    store: Annotated[BookingStore, Depends(deps.get_store)],
    availability: Annotated[AvailabilityService, Depends(deps.get_availability_service)],
    now: Annotated[datetime, Depends(deps.get_now)],
) -> AvailabilityResponse:
    """Return a lock-free snapshot; the figures may be stale by the time a booking is made."""
    window = build_window(from_date, to_datetime, now=now, enforce_horizon=True)
    calendar = await availability.calendar(store, window)
    return AvailabilityResponse(
        range=RangeEcho(**window.to_dict()),
        all_days_have_space=all(day.available > 0 for day in calendar),
        per_day=[DailyAvailability(**day.to_dict()) for day in calendar],
    )
