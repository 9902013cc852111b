"""Tests for stay windows and money values."""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from parking.core.errors import InvalidRange
from parking.domain import DateRange, Money
from parking.domain.normalization import display_text, normalize_email, normalize_reg

LONDON = ZoneInfo("Europe/London")


def test_pickup_day_is_not_occupied() -> None:
    window = DateRange(date(2025, 8, 10), datetime(2025, 8, 12, 18, 30, tzinfo=UTC))
    assert list(window.occupied_days()) == [date(2025, 8, 10), date(2025, 8, 11)]
    assert window.night_count == 2


@pytest.mark.parametrize(
    "pickup",
    [
        datetime(2025, 8, 23, 0, 0, 1, tzinfo=UTC),
        datetime(2025, 8, 23, 12, 0, tzinfo=UTC),
        datetime(2025, 8, 23, 23, 59, 59, tzinfo=UTC),
    ],
)
def test_pickup_time_of_day_does_not_change_occupied_days(pickup: datetime) -> None:
    window = DateRange(date(2025, 8, 22), pickup)
    assert list(window.occupied_days()) == [date(2025, 8, 22)]
    assert window.night_count == 1


def test_same_day_pickup_occupies_nothing() -> None:
    window = DateRange(date(2025, 8, 10), datetime(2025, 8, 10, 9, 0, tzinfo=UTC))
    assert list(window.occupied_days()) == []
    assert window.night_count == 0


def test_occupied_days_can_be_walked_twice() -> None:
    window = DateRange(date(2025, 8, 10), datetime(2025, 8, 13, tzinfo=UTC))
    assert list(window.occupied_days()) == list(window.occupied_days())


@pytest.mark.parametrize(
    "to_moment",
    [
        datetime(2025, 8, 10, 0, 0, tzinfo=UTC),
        datetime(2025, 8, 9, 23, 59, tzinfo=UTC),
    ],
)
def test_end_at_or_before_start_is_rejected(to_moment: datetime) -> None:
    with pytest.raises(InvalidRange):
        DateRange(date(2025, 8, 10), to_moment)


def test_naive_pickup_is_read_in_the_calendar_zone() -> None:
    window = DateRange(date(2025, 7, 1), datetime(2025, 7, 3, 10, 0), LONDON)
    assert window.to_moment.tzinfo is LONDON
    assert window.to_iso() == "2025-07-03T10:00:00+01:00"


def test_pickup_is_converted_into_the_calendar_zone() -> None:
    # 23:30 UTC on the 2nd is already the 3rd in London during summer time
    window = DateRange(date(2025, 7, 1), datetime(2025, 7, 2, 23, 30, tzinfo=UTC), LONDON)
    assert window.checkout_day == date(2025, 7, 3)
    assert len(list(window.occupied_days())) == 2


def test_days_across_daylight_saving_change() -> None:
    window = DateRange(date(2025, 3, 29), datetime(2025, 3, 31, 10, 0), LONDON)
    assert list(window.occupied_days()) == [date(2025, 3, 29), date(2025, 3, 30)]


def test_overlap_is_half_open() -> None:
    first = DateRange(date(2025, 8, 10), datetime(2025, 8, 12, 0, 0, tzinfo=UTC))
    touching = DateRange(date(2025, 8, 12), datetime(2025, 8, 14, tzinfo=UTC))
    crossing = DateRange(date(2025, 8, 11), datetime(2025, 8, 14, tzinfo=UTC))
    assert not first.overlaps(touching)
    assert not touching.overlaps(first)
    assert first.overlaps(crossing)
    assert crossing.overlaps(first)


def test_same_day_pickup_still_overlaps_a_later_dropoff() -> None:
    first = DateRange(date(2025, 8, 10), datetime(2025, 8, 12, 15, 0, tzinfo=UTC))
    second = DateRange(date(2025, 8, 12), datetime(2025, 8, 14, tzinfo=UTC))
    assert first.overlaps(second)


def test_to_dict_echoes_inputs() -> None:
    window = DateRange(date(2025, 8, 10), datetime(2025, 8, 12, 9, 0, tzinfo=UTC))
    assert window.to_dict() == {
        "from_date": "2025-08-10",
        "to_datetime": "2025-08-12T09:00:00+00:00",
    }


def test_money_display_and_addition() -> None:
    total = Money(1500, "GBP") + Money(2000, "GBP")
    assert total == Money(3500, "GBP")
    assert total.amount == Decimal("35.00")
    assert str(total) == "GBP 35.00"
    assert str(Money(500, "JPY")) == "JPY 500"


def test_money_rejects_mixed_currencies_and_fractions() -> None:
    with pytest.raises(ValueError):
        Money(100, "GBP") + Money(100, "EUR")
    with pytest.raises(TypeError):
        Money(1.5, "GBP")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        Money(100, "gbp")


def test_normalisation_helpers() -> None:
    assert normalize_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"
    assert normalize_reg(" ab12  cde ") == "AB12CDE"
    assert display_text("  ab12   Cde ") == "ab12 Cde"
