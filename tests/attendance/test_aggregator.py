from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from shift_attendance.attendance.aggregator import DurationAggregator
from shift_attendance.attendance.model import AttendanceSession, BreakInterval, format_hours
from shift_attendance.core.enums import BreakPolicy

H = timedelta(hours=1)


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _session(employee_id, check_in, check_out=None, breaks=(), session_id=1):
    return AttendanceSession(
        session_id=session_id,
        employee_id=employee_id,
        check_in=check_in,
        check_out=check_out,
        breaks=breaks,
    )


@pytest.fixture
def paid(normalizer):
    return DurationAggregator(normalizer)


@pytest.fixture
def unpaid(normalizer):
    return DurationAggregator(normalizer, break_policy=BreakPolicy.UNPAID)


def test_nine_to_five_is_eight_hours(paid, unpaid):
    # 09:00-17:00 at UTC+5
    s = _session(2, _utc(2026, 2, 2, 4), _utc(2026, 2, 2, 12))
    now = _utc(2026, 2, 3, 12)

    assert format_hours(paid.session_duration(s, now)) == "8.0"
    assert format_hours(unpaid.session_duration(s, now)) == "8.0"


def test_breaks_are_paid_by_default(paid, unpaid):
    lunch = BreakInterval(_utc(2026, 2, 2, 8), _utc(2026, 2, 2, 9))
    s = _session(2, _utc(2026, 2, 2, 4), _utc(2026, 2, 2, 12), breaks=(lunch,))
    now = _utc(2026, 2, 3, 12)

    assert paid.break_policy == BreakPolicy.PAID
    assert format_hours(paid.session_duration(s, now)) == "8.0"
    assert format_hours(unpaid.session_duration(s, now)) == "7.0"


def test_open_session_ticks_with_now(paid):
    check_in = _utc(2026, 2, 2, 4)
    s = _session(2, check_in)

    assert paid.session_duration(s, check_in + 2 * H) == 2 * H

    previous = timedelta(0)
    for minutes in range(0, 240, 17):
        current = paid.session_duration(s, check_in + timedelta(minutes=minutes))
        assert current >= previous
        previous = current


def test_open_break_counts_until_now_when_unpaid(paid, unpaid):
    check_in = _utc(2026, 2, 2, 4)
    s = _session(2, check_in, breaks=(BreakInterval(check_in + H),))
    now = check_in + 3 * H

    assert paid.session_duration(s, now) == 3 * H
    assert unpaid.break_duration(s, now) == 2 * H
    assert unpaid.session_duration(s, now) == H


def test_now_before_check_in_never_goes_negative(paid):
    check_in = _utc(2026, 2, 2, 4)
    assert paid.session_duration(_session(2, check_in), check_in - H) == timedelta(0)


def test_period_total_filters_employee_and_local_day(paid):
    sessions = [
        _session(2, _utc(2026, 2, 2, 4), _utc(2026, 2, 2, 8), session_id=1),
        _session(3, _utc(2026, 2, 2, 4), _utc(2026, 2, 2, 10), session_id=2),
        # 23:50 -> 00:10 local; belongs entirely to Feb 2
        _session(2, _utc(2026, 2, 2, 18, 50), _utc(2026, 2, 2, 19, 10), session_id=3),
    ]
    now = _utc(2026, 2, 4, 12)

    feb2 = paid.period_total(2, sessions, date(2026, 2, 2), date(2026, 2, 2), now)
    feb3 = paid.period_total(2, sessions, date(2026, 2, 3), date(2026, 2, 3), now)

    assert feb2.session_count == 2
    assert feb2.total_duration == 4 * H + timedelta(minutes=20)
    assert feb2.hours == "4.3"
    assert feb3.session_count == 0
    assert feb3.hours == "0.0"


def test_period_totals_today_week_month(paid):
    # Wednesday 2026-02-04 17:00 local
    now = _utc(2026, 2, 4, 12)
    sessions = [
        _session(2, _utc(2026, 2, 4, 4), _utc(2026, 2, 4, 8), session_id=1),  # today, 4h
        _session(2, _utc(2026, 2, 2, 4), _utc(2026, 2, 2, 7), session_id=2),  # Monday, 3h
        _session(2, _utc(2026, 2, 1, 4), _utc(2026, 2, 1, 6), session_id=3),  # Sunday, previous week, 2h
        _session(2, _utc(2026, 1, 30, 4), _utc(2026, 1, 30, 9), session_id=4),  # previous month, 5h
    ]

    totals = paid.period_totals(2, sessions, now)

    assert (totals.today.hours, totals.week.hours, totals.month.hours) == ("4.0", "7.0", "9.0")
    assert (totals.today.session_count, totals.week.session_count, totals.month.session_count) == (1, 2, 3)
    assert totals.week.first_day == date(2026, 2, 2)
    assert totals.month.last_day == date(2026, 2, 28)
