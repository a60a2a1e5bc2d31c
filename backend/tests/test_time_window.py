"""Tests for local-day window resolution and date labels."""
from datetime import date, datetime, timedelta, timezone

import pytest

from revenue_bot.services.time_window import (
    MAX_DATE_OPTIONS,
    format_calendar_label,
    format_payout_date,
    local_today,
    parse_local_date,
    recent_local_dates,
    resolve_day_window,
)

# 2024-01-15 00:00:00 UTC (a Monday)
JAN_15_UTC = 1705276800


# ─── resolve_day_window ───────────────────────────────────────────────────────

def test_utc_day_window():
    window = resolve_day_window(date(2024, 1, 15), 0)
    assert window.start == JAN_15_UTC
    assert window.end == JAN_15_UTC + 86399


def test_negative_offset_shifts_window_later():
    """UTC-5: local midnight is 05:00 UTC."""
    window = resolve_day_window(date(2024, 1, 15), -5)
    assert window.start == JAN_15_UTC + 5 * 3600
    assert window.end == window.start + 86399


def test_positive_offset_shifts_window_earlier():
    window = resolve_day_window(date(2024, 1, 15), 9)
    assert window.start == JAN_15_UTC - 9 * 3600


@pytest.mark.parametrize("offset", range(-12, 15))
def test_window_length_is_constant_for_every_offset(offset):
    for day in (date(2024, 2, 29), date(2024, 3, 10), date(2024, 12, 31), date(2025, 1, 1)):
        window = resolve_day_window(day, offset)
        assert window.start < window.end
        assert window.end - window.start == 86399


def test_aware_datetime_uses_its_utc_calendar_date():
    # 23:00 at UTC-5 is already the 16th in UTC
    moment = datetime(2024, 1, 15, 23, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert resolve_day_window(moment, 0).start == JAN_15_UTC + 86400


def test_consecutive_days_do_not_overlap():
    first = resolve_day_window(date(2024, 1, 15), 3)
    second = resolve_day_window(date(2024, 1, 16), 3)
    assert second.start == first.end + 1


def test_created_filter_is_inclusive():
    window = resolve_day_window(date(2024, 1, 15), 0)
    assert window.as_created_filter() == {"gte": JAN_15_UTC, "lte": JAN_15_UTC + 86399}


# ─── Local "today" and labels ─────────────────────────────────────────────────

def test_local_today_crosses_midnight_with_offset():
    now = datetime(2024, 1, 15, 2, 0, tzinfo=timezone.utc)
    assert local_today(0, now) == date(2024, 1, 15)
    assert local_today(-5, now) == date(2024, 1, 14)
    assert local_today(14, datetime(2024, 1, 15, 11, 0, tzinfo=timezone.utc)) == date(2024, 1, 16)


def test_calendar_label_for_date():
    assert format_calendar_label(date(2024, 1, 15), 0) == "Mon Jan 15"
    assert format_calendar_label(date(2024, 1, 15), 0, include_year=True) == "Mon Jan 15, 2024"


def test_calendar_label_for_datetime_applies_offset():
    moment = datetime(2024, 1, 15, 2, 0, tzinfo=timezone.utc)
    assert format_calendar_label(moment, -5) == "Sun Jan 14"


def test_payout_date():
    assert format_payout_date(JAN_15_UTC, 0) == "Jan 15"
    assert format_payout_date(JAN_15_UTC, -1) == "Jan 14"


def test_recent_local_dates_labels():
    now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    options = recent_local_dates(0, count=3, now=now)

    assert [o.value for o in options] == ["2024-01-15", "2024-01-14", "2024-01-13"]
    assert [o.label for o in options] == [
        "Today - Mon Jan 15",
        "Yesterday - Sun Jan 14",
        "Sat Jan 13, 2024",
    ]


def test_recent_local_dates_follow_local_day():
    now = datetime(2024, 1, 15, 2, 0, tzinfo=timezone.utc)
    options = recent_local_dates(-5, now=now)

    assert len(options) == MAX_DATE_OPTIONS
    assert options[0].value == "2024-01-14"
    assert options[0].label == "Today - Sun Jan 14"
    assert options[-1].value == "2023-12-21"


@pytest.mark.parametrize("count", [0, 26])
def test_recent_local_dates_rejects_out_of_range_count(count):
    with pytest.raises(ValueError):
        recent_local_dates(0, count=count)


def test_option_value_round_trips_to_window():
    now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    option = recent_local_dates(-5, count=1, now=now)[0]
    assert parse_local_date(option.value) == date(2024, 1, 15)
    assert resolve_day_window(parse_local_date(option.value), -5).start == JAN_15_UTC + 5 * 3600
