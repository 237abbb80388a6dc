"""Logging filters that scrub credentials from log output."""

from __future__ import annotations

import logging
import re

REDACTED = "**REDACTED**"

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization:\s*Bearer\s+[\w\.-]+"
    r"|access_token\"\s*:\s*\"[^\"]+\""
    r"|password\"\s*:\s*\"[^\"]+\""
    r"|password=[^&\s]+"
    r"|eyJ[\w-]+\.[\w-]+\.[\w-]+)",
    re.IGNORECASE,
)


def redact(value: str) -> str:
    return _SENSITIVE_PATTERN.sub(REDACTED, value)


class SensitiveFilter(logging.Filter):
    """Replace bearer tokens and passwords in log records with a marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                redact(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True


def install_sensitive_filter(*logger_names: str) -> None:
    """Attach one ``SensitiveFilter`` to each named logger."""
    for name in logger_names:
        target = logging.getLogger(name)
        if not any(isinstance(flt, SensitiveFilter) for flt in target.filters):
            target.addFilter(SensitiveFilter())


__all__ = ["REDACTED", "SensitiveFilter", "install_sensitive_filter", "redact"]
