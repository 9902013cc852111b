"""Common API dependencies."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from parking.core.config import get_settings
from parking.db.session import get_session
from parking.repositories import BookingStore, SqlAlchemyBookingStore
from parking.services import (
    AvailabilityService,
    BookingService,
    PricingConfig,
    PricingService,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


async def get_store(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> BookingStore:
    return SqlAlchemyBookingStore(session)


def get_now() -> datetime:
    """Current instant in the booking calendar; overridden in tests."""
    return datetime.now(get_settings().calendar)


@lru_cache
def get_pricing_service() -> PricingService:
    settings = get_settings()
    return PricingService(
        PricingConfig(
            currency=settings.pricing_currency,
            rates=settings.pricing_rates,
            summer_months=frozenset(settings.summer_months),
            winter_months=frozenset(settings.winter_months),
            default_season=settings.default_season,
            weekend_days=frozenset(settings.weekend_days),
        )
    )


@lru_cache
def get_availability_service() -> AvailabilityService:
    return AvailabilityService(default_capacity=get_settings().default_capacity)


@lru_cache
def get_booking_service() -> BookingService:
    settings = get_settings()
    return BookingService(
        get_availability_service(),
        get_pricing_service(),
        tz=settings.calendar,
        reference_prefix=settings.reference_prefix,
    )


def reset_service_cache() -> None:
    """Drop cached services after settings change (tests, reconfiguration)."""
    get_pricing_service.cache_clear()
    get_availability_service.cache_clear()
    get_booking_service.cache_clear()
