"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

from bistro.security.redact import mask_email

_SECRET_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+|access_token\"\s*:\s*\"[^\"]+\"|password\"\s*:\s*\"[^\"]+\")",
    re.IGNORECASE,
)
_EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")


def scrub(message: str) -> str:
    """Redact bearer tokens and passwords, and mask email addresses."""
    message = _SECRET_PATTERN.sub("**REDACTED**", message)
    return _EMAIL_PATTERN.sub(lambda match: mask_email(match.group(0)) or "", message)


class SensitiveFilter(logging.Filter):
    """Rewrite log records so secrets and guest emails never reach handlers."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = scrub(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                scrub(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True


def install_sensitive_filter(*logger_names: str) -> None:
    for name in logger_names:
        target = logging.getLogger(name)
        if not any(isinstance(flt, SensitiveFilter) for flt in target.filters):
            target.addFilter(SensitiveFilter())


__all__ = ["SensitiveFilter", "install_sensitive_filter", "scrub"]
