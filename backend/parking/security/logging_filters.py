"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

from parking.security.redact import mask_email

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+|access_token\"\s*:\s*\"[^\"]+\")",
    re.IGNORECASE,
)
_EMAIL_PATTERN = re.compile(r"[\w\.+-]+@[\w-]+(?:\.[\w-]+)+")


def scrub(message: str) -> str:
    message = _SENSITIVE_PATTERN.sub("**REDACTED**", message)
    return _EMAIL_PATTERN.sub(lambda match: mask_email(match.group(0)) or "", message)


class SensitiveFilter(logging.Filter):
    """Replace tokens and customer emails in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = scrub(record.msg)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    key: scrub(value) if isinstance(value, str) else value
                    for key, value in record.args.items()
                }
            else:
                record.args = tuple(
                    scrub(arg) if isinstance(arg, str) else arg for arg in record.args
                )
        return True


__all__ = ["SensitiveFilter", "scrub"]
