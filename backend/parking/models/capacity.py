"""Per-day capacity overrides."""

from __future__ import annotations

from datetime import date

from sqlalchemy import CheckConstraint, Date, Integer
from sqlalchemy.orm import Mapped, mapped_column

from parking.db.base import Base
from parking.models.mixins import TimestampMixin


class Capacity(TimestampMixin, Base):
    """Capacity ledger row for one calendar day.

    A missing row means the configured default applies. Rows are created
    lazily the first time a write locks the day.
    """

    __tablename__ = "capacities"
    __table_args__ = (CheckConstraint("capacity >= 0", name="non_negative"),)

    day: Mapped[date] = mapped_column(Date(), primary_key=True)
    capacity: Mapped[int] = mapped_column(Integer(), nullable=False)
