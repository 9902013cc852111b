"""Translate core failures into HTTP errors."""

from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException, status

from parking.core.errors import BookingError, TransientStoreError


def raise_http(error: BookingError | TransientStoreError) -> NoReturn:
    if isinstance(error, TransientStoreError):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="The booking store is busy; please retry shortly.",
        ) from error
    raise HTTPException(status_code=error.status_code, detail=error.message) from error
