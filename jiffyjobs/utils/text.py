"""Helpers to clean up user supplied chat text."""

from __future__ import annotations

import html
import re
from typing import Final

MAX_MESSAGE_LENGTH: Final[int] = 5000

_TAG_PATTERN: Final[re.Pattern[str]] = re.compile(r"<[^>]*>")


def sanitize_message(message: str | None) -> str:
    """Strip HTML tags from ``message`` and escape the remaining markup characters."""

    if not message or not isinstance(message, str):
        return ""

    stripped = _TAG_PATTERN.sub("", message)
    return html.escape(stripped, quote=True).strip()


def is_valid_message(message: str | None) -> bool:
    """Return ``True`` when ``message`` has between 1 and 5000 visible characters."""

    if not message or not isinstance(message, str):
        return False
    trimmed = message.strip()
    return 0 < len(trimmed) <= MAX_MESSAGE_LENGTH


__all__ = ["MAX_MESSAGE_LENGTH", "is_valid_message", "sanitize_message"]
