"""Bounded retry of whole write operations on transient store failures."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from parking.core.config import get_settings
from parking.core.errors import TransientStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_with_retries(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int | None = None,
    backoff_ms: int | None = None,
) -> T:
    """Run ``operation`` from the top until it succeeds or attempts run out.

    Only ``TransientStoreError`` is retried; business failures propagate
    on the first raise.
    """
    settings = get_settings()
    max_attempts = attempts if attempts is not None else settings.write_retry_attempts
    backoff = backoff_ms if backoff_ms is not None else settings.write_retry_backoff_ms

    attempt = 1
    while True:
        try:
            return await operation()
        except TransientStoreError:
            if attempt >= max_attempts:
                logger.error("Giving up after %s attempts", attempt)
                raise
            logger.warning("Transient store failure on attempt %s; retrying", attempt)
            await asyncio.sleep(backoff * attempt / 1000)
            attempt += 1
