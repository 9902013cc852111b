"""Price quote schemas."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class PriceLineRead(BaseModel):
    date: date
    season: str
    day_type: str
    amount_minor: int


class PriceQuoteRead(BaseModel):
    """Serialized quote with an exact integer total."""

    currency: str
    total_minor: int
    total: str
    breakdown: list[PriceLineRead]
