"""Booking management API."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from parking.api import deps
from parking.api.errors import raise_http
from parking.api.ranges import build_window
from parking.api.rate_limit import DEFAULT_RATE_DEP
from parking.api.retry import run_with_retries
from parking.core.config import get_settings
from parking.core.errors import BookingError, BookingNotActive, TransientStoreError
from parking.models import Booking
from parking.repositories import BookingStore
from parking.schemas.booking import (
    BookingAmend,
    BookingCancelled,
    BookingCreate,
    BookingRead,
)
from parking.services import BookingService

router = APIRouter(dependencies=[DEFAULT_RATE_DEP])


def _read(booking: Booking) -> BookingRead:
    return BookingRead.from_booking(booking, get_settings().calendar)


async def _get_booking_or_404(
    service: BookingService, store: BookingStore, booking_id: uuid.UUID
) -> Booking:
    booking = await service.get(store, booking_id)
    if booking is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


@router.post(
    "",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create booking",
)
async def create_booking(
    payload: BookingCreate,
    store: Annotated[BookingStore, Depends(deps.get_store)],
    service: Annotated[BookingService, Depends(deps.get_booking_service)],
    now: Annotated[datetime, Depends(deps.get_now)],
) -> BookingRead:
    build_window(payload.from_date, payload.to_datetime, now=now, enforce_max_stay=True)

    async def _create() -> Booking:
        return await service.create(
            store,
            customer_name=payload.customer_name,
            customer_email=str(payload.customer_email),
            vehicle_reg=payload.vehicle_reg,
            from_date=payload.from_date,
            to_datetime=payload.to_datetime,
        )

    try:
        booking = await run_with_retries(_create)
    except (BookingError, TransientStoreError) as exc:
        raise_http(exc)
    return _read(booking)


@router.get(
    "/by-reference/{reference}",
    response_model=BookingRead,
    summary="Get booking by reference",
)
async def get_booking_by_reference(
    reference: str,
    store: Annotated[BookingStore, Depends(deps.get_store)],
    service: Annotated[BookingService, Depends(deps.get_booking_service)],
) -> BookingRead:
    booking = await service.get_by_reference(store, reference)
    if booking is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return _read(booking)


@router.get("/{booking_id}", response_model=BookingRead, summary="Get booking")
async def get_booking(
    booking_id: uuid.UUID,
    store: Annotated[BookingStore, Depends(deps.get_store)],
    service: Annotated[BookingService, Depends(deps.get_booking_service)],
) -> BookingRead:
    return _read(await _get_booking_or_404(service, store, booking_id))


@router.put("/{booking_id}", response_model=BookingRead, summary="Amend booking")
async def amend_booking(
    booking_id: uuid.UUID,
    payload: BookingAmend,
    store: Annotated[BookingStore, Depends(deps.get_store)],
    service: Annotated[BookingService, Depends(deps.get_booking_service)],
    now: Annotated[datetime, Depends(deps.get_now)],
) -> BookingRead:
    booking = await _get_booking_or_404(service, store, booking_id)
    if not booking.is_active:
        raise_http(BookingNotActive())
    build_window(payload.from_date, payload.to_datetime, now=now, enforce_max_stay=True)

    async def _amend() -> Booking:
        current = await _get_booking_or_404(service, store, booking_id)
        return await service.amend(
            store,
            current,
            from_date=payload.from_date,
            to_datetime=payload.to_datetime,
            customer_name=payload.customer_name,
            customer_email=(
                str(payload.customer_email) if payload.customer_email is not None else None
            ),
            vehicle_reg=payload.vehicle_reg,
            expected_version=payload.expected_version,
        )

    try:
        amended = await run_with_retries(_amend)
    except (BookingError, TransientStoreError) as exc:
        raise_http(exc)
    return _read(amended)


@router.delete(
    "/{booking_id}",
    response_model=BookingCancelled,
    summary="Cancel booking",
)
async def cancel_booking(
    booking_id: uuid.UUID,
    store: Annotated[BookingStore, Depends(deps.get_store)],
    service: Annotated[BookingService, Depends(deps.get_booking_service)],
) -> BookingCancelled:
    async def _cancel() -> Booking:
        current = await _get_booking_or_404(service, store, booking_id)
        return await service.cancel(store, current)

    try:
        cancelled = await run_with_retries(_cancel)
    except (BookingError, TransientStoreError) as exc:
        raise_http(exc)
    return BookingCancelled(booking=_read(cancelled), reference=cancelled.reference)
