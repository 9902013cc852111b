"""Tests for log scrubbing."""

import logging

from parking.security.logging_filters import SensitiveFilter, scrub
from parking.security.redact import mask_email, mask_reg


def test_scrub_masks_emails_and_tokens() -> None:
    message = "Authorization: Bearer abc.def-123 for jane.doe@example.com"
    scrubbed = scrub(message)
    assert "abc.def-123" not in scrubbed
    assert "jane.doe@example.com" not in scrubbed
    assert "j***@example.com" in scrubbed


def test_filter_scrubs_args() -> None:
    record = logging.LogRecord(
        "parking", logging.INFO, __file__, 1, "Duplicate for %s", ("jane@example.com",), None
    )
    assert SensitiveFilter().filter(record) is True
    assert record.getMessage() == "Duplicate for j***@example.com"


def test_mask_helpers() -> None:
    assert mask_email("x@example.com") == "x***@example.com"
    assert mask_email(None) is None
    assert mask_reg("AB12 CDE") == "AB***E"
    assert mask_reg("AB1") == "***"
