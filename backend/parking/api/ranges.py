"""Request-level checks on booking windows."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from fastapi import HTTPException, status

from parking.core.config import get_settings
from parking.core.errors import InvalidRange
from parking.domain.date_range import DateRange


def _unprocessable(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


def build_window(
    from_date: date,
    to_datetime: datetime,
    *,
    now: datetime,
    enforce_horizon: bool = False,
    enforce_max_stay: bool = False,
) -> DateRange:
    """Validate a client-supplied window against the current day and limits."""
    settings = get_settings()
    tz = settings.calendar
    today = now.astimezone(tz).date()

    if from_date < today:
        raise _unprocessable("The start date must be today or a future date.")
    try:
        window = DateRange.build(from_date, to_datetime, tz)
    except InvalidRange as exc:
        raise _unprocessable(exc.message) from exc

    if enforce_horizon:
        limit_day = today + timedelta(days=settings.quote_horizon_days)
        limit = datetime.combine(limit_day, time.max, tzinfo=tz)
        if window.to_moment > limit:
            raise _unprocessable(
                "The end date/time cannot be more than "
                f"{settings.quote_horizon_days} days in the future."
            )
    if enforce_max_stay and window.night_count > settings.max_stay_days:
        raise _unprocessable(f"The stay may not exceed {settings.max_stay_days} days.")
    return window
