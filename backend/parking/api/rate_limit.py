"""Optional Redis-backed request throttling."""

from __future__ import annotations

from fastapi import Depends, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter

from parking.core.config import get_settings

_SECONDS_MAP = {
    "second": 1,
    "seconds": 1,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


def parse_rate(value: str, fallback: tuple[int, int] = (60, 60)) -> tuple[int, int]:
    """Parse ``"60/minute"`` into ``(times, seconds)``."""
    count_str, _, window_str = value.partition("/")
    try:
        count = int(count_str.strip())
    except ValueError:
        return fallback
    seconds = _SECONDS_MAP.get(window_str.strip().lower(), fallback[1])
    return count, seconds


def rate_dependency(limit: tuple[int, int] | None = None):
    times, seconds = limit or parse_rate(get_settings().rate_limit_default)

    async def _dependency(request: Request, response: Response) -> None:
        if FastAPILimiter.redis is None:
            return None
        limiter = RateLimiter(times=times, seconds=seconds)
        await limiter(request, response)

    return Depends(_dependency)


DEFAULT_RATE_DEP = rate_dependency()
