"""Calendar window occupied by a reservation."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from parking.core.errors import InvalidRange


def start_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


@dataclass(frozen=True, slots=True)
class DateRange:
    """Drop-off day and pick-up instant, evaluated in a single calendar.

    Occupancy is half-open: every day from ``from_date`` up to, but not
    including, the day containing ``to_moment``. The pick-up day itself is
    never occupied, whatever the time of day.
    """

    from_date: date
    to_moment: datetime
    tz: tzinfo = field(default=UTC)

    def __post_init__(self) -> None:
        from_date = self.from_date
        if isinstance(from_date, datetime):
            if from_date.tzinfo is not None:
                from_date = from_date.astimezone(self.tz)
            object.__setattr__(self, "from_date", from_date.date())

        to_moment = self.to_moment
        if to_moment.tzinfo is None:
            to_moment = to_moment.replace(tzinfo=self.tz)
        object.__setattr__(self, "to_moment", to_moment.astimezone(self.tz))

        if self.to_moment <= self.start:
            raise InvalidRange()

    @classmethod
    def build(cls, from_date: date, to_moment: datetime, tz: tzinfo) -> DateRange:
        return cls(from_date=from_date, to_moment=to_moment, tz=tz)

    @property
    def start(self) -> datetime:
        """Midnight at the start of the drop-off day."""
        return start_of_day(self.from_date, self.tz)

    @property
    def checkout_day(self) -> date:
        return self.to_moment.date()

    def occupied_days(self) -> Iterator[date]:
        """Yield each occupied day in ascending order.

        Every call starts a fresh walk, so the sequence can be consumed
        more than once.
        """
        current = self.from_date
        while current < self.checkout_day:
            yield current
            current += timedelta(days=1)

    @property
    def night_count(self) -> int:
        return max((self.checkout_day - self.from_date).days, 0)

    def overlaps(self, other: DateRange) -> bool:
        """Half-open overlap: touching endpoints do not overlap."""
        return self.start < other.to_moment and self.to_moment > other.start

    def to_iso(self) -> str:
        return self.to_moment.isoformat(timespec="seconds")

    def to_dict(self) -> dict[str, str]:
        return {"from_date": self.from_date.isoformat(), "to_datetime": self.to_iso()}
