"""Tests for storage and display timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from jiffyjobs.utils import datetime as datetime_utils


@pytest.fixture
def new_york(monkeypatch: pytest.MonkeyPatch):
    try:
        ZoneInfo("America/New_York")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")
    monkeypatch.setattr(
        datetime_utils, "get_settings", lambda: SimpleNamespace(app_timezone="America/New_York")
    )
    datetime_utils.get_app_timezone.cache_clear()
    yield
    datetime_utils.get_app_timezone.cache_clear()


def test_storage_order_survives_dst_fall_back(new_york) -> None:
    # 01:30 EDT and 01:10 EST on 2024-11-03: later instant, earlier wall clock.
    first = datetime(2024, 11, 3, 5, 30, tzinfo=timezone.utc)
    second = datetime(2024, 11, 3, 6, 10, tzinfo=timezone.utc)

    assert datetime_utils.to_storage(first) < datetime_utils.to_storage(second)
    assert datetime_utils.to_storage(second) == datetime(2024, 11, 3, 6, 10)
    assert datetime_utils.to_app_timezone(first).hour == 1
    assert datetime_utils.to_app_timezone(second).hour == 1


def test_values_read_back_are_aware_utc() -> None:
    restored = datetime_utils.from_storage(datetime(2024, 5, 1, 12, 0))

    assert restored == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert datetime_utils.from_storage(None) is None
    assert datetime_utils.to_storage(None) is None


def test_display_uses_app_timezone(new_york) -> None:
    rendered = datetime_utils.format_app_datetime(datetime(2024, 7, 1, 16, 0, tzinfo=timezone.utc))

    assert rendered == "2024-07-01 12:00 EDT"


def test_unknown_timezone_falls_back_to_utc(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        datetime_utils, "get_settings", lambda: SimpleNamespace(app_timezone="Mars/Olympus")
    )
    datetime_utils.get_app_timezone.cache_clear()
    try:
        assert datetime_utils.get_app_timezone() is timezone.utc
    finally:
        datetime_utils.get_app_timezone.cache_clear()
