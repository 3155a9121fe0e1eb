"""Input sanitization helpers for request payloads."""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")


def _strip_control_chars(value: str) -> str:
    return "".join(ch for ch in value if unicodedata.category(ch) != "Cc")


def clean_single_line(value: str | None) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = _strip_control_chars(value).strip()
    return _WHITESPACE_RE.sub(" ", value)


def clean_email(value: str | None) -> str | None:
    cleaned = clean_single_line(value)
    return cleaned.lower() if cleaned is not None else None


def clean_token(value: str | None) -> str | None:
    """Tokens are hex; drop surrounding whitespace and any control characters."""
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return _strip_control_chars(value).strip()
