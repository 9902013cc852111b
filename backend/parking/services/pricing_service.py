"""Pricing engine for parking stays."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from parking.core.errors import PricingConfigError
from parking.domain.date_range import DateRange
from parking.domain.money import Money

SUMMER = "summer"
WINTER = "winter"


class DayType(str, enum.Enum):
    """Rate column a day is charged from."""

    WEEKDAY = "weekday"
    WEEKEND = "weekend"


@dataclass(frozen=True, slots=True)
class PricingConfig:
    """Rate table and calendar rules, fixed at startup.

    ``weekend_days`` uses 0=Sunday ... 6=Saturday.
    """

    currency: str
    rates: Mapping[str, Mapping[str, int]]
    summer_months: frozenset[int]
    winter_months: frozenset[int]
    default_season: str = WINTER
    weekend_days: frozenset[int] = field(default_factory=lambda: frozenset({0, 6}))

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "rates",
            {season: dict(row) for season, row in self.rates.items()},
        )
        for name in ("summer_months", "winter_months", "weekend_days"):
            object.__setattr__(self, name, frozenset(getattr(self, name)))

        try:
            Money(0, self.currency)
        except ValueError as exc:
            raise PricingConfigError(str(exc)) from exc
        if any(month not in range(1, 13) for month in self.summer_months | self.winter_months):
            raise PricingConfigError("Season months must be between 1 and 12")
        if self.summer_months & self.winter_months:
            raise PricingConfigError("A month cannot be both summer and winter")
        if any(day not in range(7) for day in self.weekend_days):
            raise PricingConfigError("Weekend days must be between 0 (Sun) and 6 (Sat)")

        for season in self._reachable_seasons():
            row = self.rates.get(season)
            if row is None:
                raise PricingConfigError(f"No rates configured for season {season!r}")
            for day_type in DayType:
                amount = row.get(day_type.value)
                if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
                    raise PricingConfigError(
                        f"Rate {season}/{day_type.value} must be a non-negative integer"
                    )

    def _reachable_seasons(self) -> set[str]:
        seasons = {self.default_season}
        if self.summer_months:
            seasons.add(SUMMER)
        if self.winter_months:
            seasons.add(WINTER)
        return seasons


@dataclass(slots=True)
class PriceLine:
    """Charge for a single occupied day."""

    date: date
    season: str
    day_type: DayType
    amount_minor: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "season": self.season,
            "day_type": self.day_type.value,
            "amount_minor": self.amount_minor,
        }


@dataclass(slots=True)
class PriceQuote:
    """Aggregate pricing output for a date range."""

    currency: str
    total_minor: int
    breakdown: list[PriceLine]

    @property
    def total(self) -> Money:
        return Money(self.total_minor, self.currency)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the quote to plain types for responses."""
        return {
            "currency": self.currency,
            "total_minor": self.total_minor,
            "total": str(self.total),
            "breakdown": [line.to_dict() for line in self.breakdown],
        }


class PricingService:
    """Price each occupied day from the season x day-type table."""

    def __init__(self, config: PricingConfig) -> None:
        self._config = config

    @property
    def currency(self) -> str:
        return self._config.currency

    def season_for(self, day: date) -> str:
        if day.month in self._config.summer_months:
            return SUMMER
        if day.month in self._config.winter_months:
            return WINTER
        return self._config.default_season

    def day_type_for(self, day: date) -> DayType:
        # isoweekday: Mon=1 .. Sun=7, so % 7 gives Sun=0 .. Sat=6
        if day.isoweekday() % 7 in self._config.weekend_days:
            return DayType.WEEKEND
        return DayType.WEEKDAY

    def price_days(self, days: Iterable[date]) -> PriceQuote:
        breakdown: list[PriceLine] = []
        total_minor = 0
        for day in days:
            season = self.season_for(day)
            day_type = self.day_type_for(day)
            amount_minor = self._config.rates[season][day_type.value]
            breakdown.append(PriceLine(day, season, day_type, amount_minor))
            total_minor += amount_minor
        return PriceQuote(
            currency=self._config.currency,
            total_minor=total_minor,
            breakdown=breakdown,
        )

    def quote(self, date_range: DateRange) -> PriceQuote:
        """Produce the deterministic price of every occupied day in the range."""
        return self.price_days(date_range.occupied_days())
