"""Masking for guest contact details that end up in logs."""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def mask_email(value: str | None) -> str | None:
    """``robin@example.com`` becomes ``r***@example.com``."""
    if not value or "@" not in value:
        return value
    local, domain = value.rsplit("@", 1)
    return f"{local[:1]}***@{domain}"


def mask_phone(value: str | None) -> str | None:
    """Keep the last four digits of a phone number."""
    if not value:
        return value
    digits = _NON_DIGITS.sub("", value)
    return f"***-***-{digits[-4:]}" if len(digits) >= 4 else "***"


__all__ = ["mask_email", "mask_phone"]
