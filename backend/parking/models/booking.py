"""Booking and per-day occupancy models."""
from __future__ import annotations

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from parking.db.base import Base
from parking.db.types import UTCDateTime
from parking.domain.money import Money
from parking.models.mixins import TimestampMixin


class BookingStatus(str, enum.Enum):
    """Lifecycle states for bookings."""

    ACTIVE = "active"
    CANCELLED = "cancelled"


class Booking(TimestampMixin, Base):
    """A parking reservation for one vehicle."""

    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("idempotency_fingerprint"),
        CheckConstraint("total_minor >= 0", name="total_non_negative"),
        CheckConstraint("version >= 1", name="version_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    reference: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)
    customer_name: Mapped[str] = mapped_column(String(120), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(120), nullable=False)
    vehicle_reg: Mapped[str] = mapped_column(String(20), nullable=False)
    vehicle_reg_normalized: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True
    )
    from_date: Mapped[date] = mapped_column(Date(), nullable=False)
    to_moment: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, native_enum=False, length=20),
        default=BookingStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    total_minor: Mapped[int] = mapped_column(Integer(), default=0, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    version: Mapped[int] = mapped_column(Integer(), default=1, nullable=False)
    idempotency_fingerprint: Mapped[str | None] = mapped_column(String(64))

    days: Mapped[list["BookingDay"]] = relationship(
        "BookingDay",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingDay.day",
        lazy="selectin",
    )

    @property
    def total(self) -> Money:
        return Money(self.total_minor, self.currency)

    @property
    def is_active(self) -> bool:
        return self.status == BookingStatus.ACTIVE

    @property
    def day_keys(self) -> list[str]:
        return [row.day.isoformat() for row in self.days]


class BookingDay(Base):
    """One occupied calendar day of a booking."""

    __tablename__ = "booking_days"
    __table_args__ = (UniqueConstraint("booking_id", "day"),)

    id: Mapped[int] = mapped_column(Integer(), primary_key=True, autoincrement=True)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day: Mapped[date] = mapped_column(Date(), nullable=False, index=True)

    booking: Mapped[Booking] = relationship("Booking", back_populates="days")
