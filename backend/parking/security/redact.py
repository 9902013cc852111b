"""Helpers for masking customer PII in logs."""

from __future__ import annotations


def mask_email(value: str | None) -> str | None:
    if not value or "@" not in value:
        return value
    local, _, domain = value.partition("@")
    if not local:
        return "***@" + domain
    return f"{local[0]}***@{domain}"


def mask_reg(value: str | None) -> str | None:
    if not value:
        return value
    compact = value.replace(" ", "")
    if len(compact) <= 3:
        return "***"
    return f"{compact[:2]}***{compact[-1]}"


__all__ = ["mask_email", "mask_reg"]
