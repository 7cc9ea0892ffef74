"""Utility helpers for reusable functionality."""

from .datetime import (
    format_app_datetime,
    from_storage,
    get_app_timezone,
    to_app_timezone,
    to_storage,
    utc_now,
    utc_now_naive,
)
from .text import MAX_MESSAGE_LENGTH, is_valid_message, sanitize_message

__all__ = [
    "format_app_datetime",
    "from_storage",
    "get_app_timezone",
    "to_app_timezone",
    "to_storage",
    "utc_now",
    "utc_now_naive",
    "MAX_MESSAGE_LENGTH",
    "is_valid_message",
    "sanitize_message",
]
