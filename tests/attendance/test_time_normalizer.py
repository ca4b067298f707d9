from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from shift_attendance.attendance.time_normalizer import TimeNormalizer
from shift_attendance.core.exceptions import ValidationError


def test_local_time_is_a_fixed_shift(normalizer, fixed_now):
    local = normalizer.to_local(fixed_now)

    assert (local.hour, local.minute) == (9, 0)
    assert normalizer.format_time(fixed_now) == "09:00"
    assert normalizer.format_datetime(fixed_now) == "2026-02-02 09:00"
    assert normalizer.offset_minutes == 300


def test_local_day_crosses_midnight_before_utc_does(normalizer):
    # 19:30 UTC is 00:30 the next day at UTC+5
    assert normalizer.local_day(datetime(2026, 2, 2, 19, 30, tzinfo=timezone.utc)) == date(2026, 2, 3)
    assert normalizer.local_day(datetime(2026, 2, 2, 18, 50, tzinfo=timezone.utc)) == date(2026, 2, 2)


def test_day_bounds_in_utc(normalizer):
    start, end = normalizer.day_bounds_utc(date(2026, 2, 2))

    assert start == datetime(2026, 2, 1, 19, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 2, 2, 19, 0, tzinfo=timezone.utc)


def test_range_bounds_reject_reversed_range(normalizer):
    with pytest.raises(ValidationError):
        normalizer.range_bounds_utc(date(2026, 2, 3), date(2026, 2, 2))


def test_range_bounds_past_the_last_representable_day(normalizer):
    with pytest.raises(ValidationError):
        normalizer.range_bounds_utc(date(9999, 12, 1), date(9999, 12, 31))


def test_week_defaults_to_monday_start(normalizer):
    assert normalizer.week_days(date(2026, 2, 4)) == (date(2026, 2, 2), date(2026, 2, 8))
    assert normalizer.week_days(date(2026, 2, 8)) == (date(2026, 2, 2), date(2026, 2, 8))


def test_week_start_is_configurable():
    sunday_weeks = TimeNormalizer(300, week_start=6)
    assert sunday_weeks.week_days(date(2026, 2, 4)) == (date(2026, 2, 1), date(2026, 2, 7))


def test_month_and_year_days():
    assert TimeNormalizer.month_days(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert TimeNormalizer.year_days(2026) == (date(2026, 1, 1), date(2026, 12, 31))
    with pytest.raises(ValidationError):
        TimeNormalizer.month_days(2026, 13)


def test_negative_offset():
    west = TimeNormalizer(-300)
    assert west.local_day(datetime(2026, 2, 2, 3, 0, tzinfo=timezone.utc)) == date(2026, 2, 1)


@pytest.mark.parametrize("kwargs", [{"offset_minutes": 15 * 60}, {"offset_minutes": 0, "week_start": 7}])
def test_invalid_configuration(kwargs):
    with pytest.raises(ValidationError):
        TimeNormalizer(**kwargs)
