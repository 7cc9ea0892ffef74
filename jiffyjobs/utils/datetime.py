"""Timestamp helpers.

Everything is stored and compared in UTC so chat history keeps a single total
order whatever ``APP_TIMEZONE`` says. SQLite ``DATETIME`` columns drop the
offset, so values go in as naive UTC and come back out as aware UTC. The app
timezone is only applied when a timestamp is rendered for people, e.g. in
emails.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from jiffyjobs.config import get_settings

logger = logging.getLogger(__name__)

DISPLAY_FORMAT = "%Y-%m-%d %H:%M %Z"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_naive() -> datetime:
    """Column default: the current UTC time without ``tzinfo``."""

    return utc_now().replace(tzinfo=None)


def to_storage(value: datetime | None) -> datetime | None:
    """Convert ``value`` to naive UTC; naive input is taken to be UTC already."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_storage(value: datetime | None) -> datetime | None:
    """Attach UTC to a value read back from a ``DATETIME`` column."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the zone named by ``APP_TIMEZONE``, or UTC when it cannot be resolved."""

    tz_name = (get_settings().app_timezone or "").strip()
    if not tz_name:
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown APP_TIMEZONE %r; rendering timestamps in UTC", tz_name)
        return timezone.utc


def to_app_timezone(value: datetime | None) -> datetime | None:
    stored = from_storage(value)
    if stored is None:
        return None
    return stored.astimezone(get_app_timezone())


def format_app_datetime(value: datetime, fmt: str = DISPLAY_FORMAT) -> str:
    return to_app_timezone(value).strftime(fmt)
