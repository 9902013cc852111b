"""Persistence gateways."""

from parking.repositories.base import BookingStore
from parking.repositories.sqlalchemy_store import SqlAlchemyBookingStore, is_transient

__all__ = ["BookingStore", "SqlAlchemyBookingStore", "is_transient"]
