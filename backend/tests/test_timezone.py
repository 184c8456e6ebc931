import os
import time
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from platecoach.utils.timezone import day_bounds, resolve_timezone


def test_day_bounds_utc():
    start, end = day_bounds(datetime(2026, 10, 19, 15, 45, tzinfo=timezone.utc), timezone.utc)
    assert start == datetime(2026, 10, 19, tzinfo=timezone.utc)
    assert end == datetime(2026, 10, 20, tzinfo=timezone.utc)


def test_day_bounds_use_local_calendar_day():
    madrid = ZoneInfo("Europe/Madrid")
    # 23:30 UTC is already the next day in Madrid (UTC+2 in summer time)
    start, end = day_bounds(datetime(2026, 7, 1, 23, 30, tzinfo=timezone.utc), madrid)
    assert start == datetime(2026, 7, 2, tzinfo=madrid)
    assert end == datetime(2026, 7, 3, tzinfo=madrid)
    assert start.astimezone(timezone.utc) == datetime(2026, 7, 1, 22, 0, tzinfo=timezone.utc)


def test_day_bounds_across_dst_change():
    madrid = ZoneInfo("Europe/Madrid")
    start, end = day_bounds(datetime(2026, 10, 25, 12, 0, tzinfo=madrid), madrid)
    # Clocks go back that night, so the local day lasts 25 hours
    assert end - start == timedelta(hours=24)
    assert end.astimezone(timezone.utc) - start.astimezone(timezone.utc) == timedelta(hours=25)


def test_naive_now_is_utc():
    start, _ = day_bounds(datetime(2026, 10, 19, 0, 30), timezone.utc)
    assert start == datetime(2026, 10, 19, tzinfo=timezone.utc)


def test_resolve_timezone():
    assert resolve_timezone("UTC") == ZoneInfo("UTC")
    assert resolve_timezone("Not/AZone") is None
    assert resolve_timezone(None) is None


@pytest.fixture
def new_york_local_time():
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "America/New_York"
    time.tzset()
    yield
    if previous is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = previous
    time.tzset()


def test_server_local_bounds_follow_dst_offset_per_day(new_york_local_time):
    # A UTC-4 offset captured before fall back would put midnight an hour early
    start, end = day_bounds(datetime(2026, 11, 2, 15, 0, tzinfo=timezone.utc))
    assert start.astimezone(timezone.utc) == datetime(2026, 11, 2, 5, 0, tzinfo=timezone.utc)
    assert end.astimezone(timezone.utc) == datetime(2026, 11, 3, 5, 0, tzinfo=timezone.utc)


def test_server_local_bounds_on_fall_back_day(new_york_local_time):
    start, end = day_bounds(datetime(2026, 11, 1, 15, 0, tzinfo=timezone.utc))
    assert start.astimezone(timezone.utc) == datetime(2026, 11, 1, 4, 0, tzinfo=timezone.utc)
    assert end.astimezone(timezone.utc) == datetime(2026, 11, 2, 5, 0, tzinfo=timezone.utc)
    assert end - start == timedelta(hours=25)
