from __future__ import annotations

from datetime import date, datetime, timezone

from src.workforce_system.workforce_system.common.datetime_utils import (
    first_day_of_next_month,
    inclusive_days,
    month_bounds,
    parse_iso_datetime,
)


def test_naive_timestamp_is_kept():
    assert parse_iso_datetime("2024-02-01T09:30:00") == datetime(2024, 2, 1, 9, 30)


def test_offset_timestamp_becomes_naive_local_time():
    parsed = parse_iso_datetime("2024-01-31T09:00:00+00:00")

    assert parsed.tzinfo is None
    expected = datetime(2024, 1, 31, 9, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parsed == expected
    # comparable with naive "now" values
    assert parsed < datetime(2030, 1, 1)


def test_month_helpers():
    assert month_bounds(2, 2024) == (date(2024, 2, 1), date(2024, 2, 29))
    assert first_day_of_next_month(date(2024, 12, 15)) == date(2025, 1, 1)
    assert inclusive_days(date(2024, 2, 5), date(2024, 2, 6)) == 2
