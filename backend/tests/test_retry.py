"""Tests for bounded write retries and transient error mapping."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from parking.api.retry import run_with_retries
from parking.core.errors import CapacityExceeded, TransientStoreError
from parking.repositories import is_transient

pytestmark = pytest.mark.asyncio


async def test_transient_failures_are_retried() -> None:
    calls = 0

    async def _flaky() -> str:
        nonlocal calls
        calls += 1
        if calls < 3:
            raise TransientStoreError("database is locked")
        return "done"

    assert await run_with_retries(_flaky, attempts=3, backoff_ms=0) == "done"
    assert calls == 3


async def test_retries_are_bounded() -> None:
    calls = 0

    async def _locked() -> None:
        nonlocal calls
        calls += 1
        raise TransientStoreError("lock timeout")

    with pytest.raises(TransientStoreError):
        await run_with_retries(_locked, attempts=2, backoff_ms=0)
    assert calls == 2


async def test_business_errors_are_not_retried() -> None:
    calls = 0

    async def _full() -> None:
        nonlocal calls
        calls += 1
        raise CapacityExceeded(date(2025, 8, 10))

    with pytest.raises(CapacityExceeded):
        await run_with_retries(_full, attempts=5, backoff_ms=0)
    assert calls == 1


class _PgError(Exception):
    def __init__(self, sqlstate: str) -> None:
        super().__init__(sqlstate)
        self.sqlstate = sqlstate


async def test_transient_classification() -> None:
    assert is_transient(OperationalError("SELECT 1", {}, Exception("database is locked")))
    assert is_transient(ProgrammingError("SELECT 1", {}, _PgError("55P03")))
    assert is_transient(ProgrammingError("SELECT 1", {}, _PgError("40P01")))
    assert not is_transient(ProgrammingError("SELECT 1", {}, _PgError("42601")))
    assert not is_transient(IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")))
