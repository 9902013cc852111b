"""Test fixtures for the parking backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import UTC, datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from parking.api import deps
from parking.core.config import get_settings
from parking.db.base import Base
from parking.db.session import dispose_engine, get_sessionmaker
from parking.main import app
from parking.repositories import SqlAlchemyBookingStore
from parking.services import (
    AvailabilityService,
    BookingService,
    PricingConfig,
    PricingService,
)

FIXED_NOW = datetime(2025, 8, 1, 9, 0, tzinfo=UTC)

SUMMER_WINTER_RATES = {
    "summer": {"weekday": 1500, "weekend": 2000},
    "winter": {"weekday": 1200, "weekend": 1600},
}


def make_pricing_service() -> PricingService:
    return PricingService(
        PricingConfig(
            currency="GBP",
            rates=SUMMER_WINTER_RATES,
            summer_months=frozenset({6, 7, 8}),
            winter_months=frozenset({12, 1, 2}),
            default_season="winter",
            weekend_days=frozenset({0, 6}),
        )
    )


def make_booking_service(capacity: int = 10) -> BookingService:
    return BookingService(
        AvailabilityService(default_capacity=capacity),
        make_pricing_service(),
        tz=UTC,
    )


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()
    deps.reset_service_cache()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)
    deps.reset_service_cache()


@pytest_asyncio.fixture()
async def store(reset_database: None, db_url: str) -> AsyncIterator[SqlAlchemyBookingStore]:
    """A booking store bound to its own session."""
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        yield SqlAlchemyBookingStore(session)


@pytest_asyncio.fixture()
async def client(
    reset_database: None, monkeypatch: pytest.MonkeyPatch
) -> AsyncIterator[AsyncClient]:
    """Async client against the app with a fixed clock and capacity of two."""
    monkeypatch.setenv("PARKING_DEFAULT_CAPACITY", "2")
    get_settings.cache_clear()
    deps.reset_service_cache()
    app.dependency_overrides[deps.get_now] = lambda: FIXED_NOW

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as http:
            yield http
    finally:
        app.dependency_overrides.pop(deps.get_now, None)
        get_settings.cache_clear()
        deps.reset_service_cache()


@pytest.fixture()
def pricing_service() -> PricingService:
    return make_pricing_service()


@pytest.fixture()
def service_factory():
    """Build a booking service with a chosen default capacity."""
    return make_booking_service
