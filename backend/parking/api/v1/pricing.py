"""Price quote API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from parking.api import deps
from parking.api.ranges import build_window
from parking.api.rate_limit import DEFAULT_RATE_DEP
from parking.schemas.pricing import PriceQuoteRead
from parking.services import PricingService

router = APIRouter(dependencies=[DEFAULT_RATE_DEP])


@router.get("", response_model=PriceQuoteRead, summary="Quote a stay")
async def get_price(
    from_date: Annotated[date, Query()],
    to_datetime: Annotated[datetime, Query()],
    pricing: Annotated[PricingService, Depends(deps.get_pricing_service)],
    now: Annotated[datetime, Depends(deps.get_now)],
) -> PriceQuoteRead:
    window = build_window(from_date, to_datetime, now=now, enforce_horizon=True)
    return PriceQuoteRead.model_validate(pricing.quote(window).to_dict())
