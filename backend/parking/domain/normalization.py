"""Pure normalisation of customer and vehicle identifiers."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_reg(vehicle_reg: str) -> str:
    """Comparison key for a registration: no whitespace, upper case."""
    return _WHITESPACE.sub("", vehicle_reg).upper()


def display_text(value: str) -> str:
    """Trim and collapse inner whitespace, keeping the original casing."""
    return _WHITESPACE.sub(" ", value.strip())
