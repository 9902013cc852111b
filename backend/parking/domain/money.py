"""Integer minor-unit money value."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal

_CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")

# ISO-4217 currencies whose minor unit is not 1/100.
_MINOR_UNIT_EXPONENTS: dict[str, int] = {
    "BHD": 3,
    "CLP": 0,
    "ISK": 0,
    "JOD": 3,
    "JPY": 0,
    "KRW": 0,
    "KWD": 3,
    "OMR": 3,
    "TND": 3,
    "VND": 0,
}


def minor_unit_exponent(currency: str) -> int:
    return _MINOR_UNIT_EXPONENTS.get(currency, 2)


@dataclass(frozen=True, slots=True)
class Money:
    """An exact amount held as an integer count of minor units."""

    minor: int
    currency: str

    def __post_init__(self) -> None:
        if isinstance(self.minor, bool) or not isinstance(self.minor, int):
            raise TypeError("Money amounts must be integer minor units")
        if not _CURRENCY_PATTERN.match(self.currency):
            raise ValueError(f"Invalid currency code: {self.currency!r}")

    @property
    def exponent(self) -> int:
        return minor_unit_exponent(self.currency)

    @property
    def amount(self) -> Decimal:
        """Major-unit amount, for display only."""
        return Decimal(self.minor).scaleb(-self.exponent)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        if other.currency != self.currency:
            raise ValueError(
                f"Cannot add {other.currency} to {self.currency}"
            )
        return Money(self.minor + other.minor, self.currency)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.{self.exponent}f}"
