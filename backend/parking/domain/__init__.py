"""Pure value objects shared by the reservation services."""

from parking.domain.date_range import DateRange, start_of_day
from parking.domain.money import Money, minor_unit_exponent
from parking.domain.normalization import display_text, normalize_email, normalize_reg

__all__ = [
    "DateRange",
    "Money",
    "display_text",
    "minor_unit_exponent",
    "normalize_email",
    "normalize_reg",
    "start_of_day",
]
