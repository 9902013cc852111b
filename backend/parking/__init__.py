"""Parking reservations service."""
