"""Tests for calendar-day keys."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from lexivault.domain.days import day_key, previous_day_key


def test_day_key_utc():
    assert day_key(datetime(2024, 3, 10, 23, 59, tzinfo=timezone.utc), timezone.utc) == "2024-03-10"


def test_day_key_uses_consumer_zone():
    instant = datetime(2024, 3, 10, 23, 30, tzinfo=timezone.utc)
    assert day_key(instant, ZoneInfo("Asia/Tokyo")) == "2024-03-11"
    assert day_key(instant, ZoneInfo("America/New_York")) == "2024-03-10"


def test_previous_day_key_crosses_month_and_leap_day():
    assert previous_day_key("2024-03-01") == "2024-02-29"
    assert previous_day_key("2024-01-01") == "2023-12-31"
