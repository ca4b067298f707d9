from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from shift_attendance.attendance.model import AttendanceSession, BreakInterval, format_hours
from shift_attendance.core.enums import ShiftState
from shift_attendance.core.exceptions import ValidationError

T0 = datetime(2026, 2, 2, 4, 0, tzinfo=timezone.utc)
H = timedelta(hours=1)


def test_check_out_must_follow_check_in():
    with pytest.raises(ValidationError):
        AttendanceSession(session_id=1, employee_id=1, check_in=T0, check_out=T0 - H)


def test_break_end_must_follow_start():
    with pytest.raises(ValidationError):
        BreakInterval(start=T0, end=T0)


def test_overlapping_breaks_are_rejected():
    with pytest.raises(ValidationError):
        AttendanceSession(
            session_id=1,
            employee_id=1,
            check_in=T0,
            breaks=(BreakInterval(T0 + H, T0 + 3 * H), BreakInterval(T0 + 2 * H, T0 + 4 * H)),
        )


def test_only_latest_break_may_be_open():
    with pytest.raises(ValidationError):
        AttendanceSession(
            session_id=1,
            employee_id=1,
            check_in=T0,
            breaks=(BreakInterval(T0 + H), BreakInterval(T0 + 2 * H, T0 + 3 * H)),
        )


def test_closed_session_cannot_hold_open_break():
    with pytest.raises(ValidationError):
        AttendanceSession(
            session_id=1,
            employee_id=1,
            check_in=T0,
            check_out=T0 + 5 * H,
            breaks=(BreakInterval(T0 + H),),
        )


def test_break_before_check_in_is_rejected():
    with pytest.raises(ValidationError):
        AttendanceSession(session_id=1, employee_id=1, check_in=T0, breaks=(BreakInterval(T0 - H, T0 + H),))


def test_naive_timestamps_are_read_as_utc():
    s = AttendanceSession(session_id=1, employee_id=1, check_in=datetime(2026, 2, 2, 4, 0))
    assert s.check_in == T0
    assert s.check_in.tzinfo == timezone.utc


def test_status_is_derived():
    open_s = AttendanceSession(session_id=1, employee_id=1, check_in=T0)
    on_break = AttendanceSession(session_id=1, employee_id=1, check_in=T0, breaks=(BreakInterval(T0 + H),))
    done = AttendanceSession(session_id=1, employee_id=1, check_in=T0, check_out=T0 + H)

    assert open_s.status == ShiftState.ACTIVE
    assert on_break.status == ShiftState.ON_BREAK
    assert on_break.open_break.start == T0 + H
    assert done.status == ShiftState.COMPLETED


@pytest.mark.parametrize(
    "duration, expected",
    [
        (timedelta(0), "0.0"),
        (timedelta(hours=8), "8.0"),
        (timedelta(hours=7, minutes=30), "7.5"),
        (timedelta(hours=7, minutes=15), "7.3"),
        (timedelta(hours=3, minutes=11), "3.2"),
        (timedelta(minutes=2), "0.0"),
        (timedelta(minutes=3), "0.1"),
    ],
)
def test_format_hours_rounds_half_up_to_one_decimal(duration, expected):
    assert format_hours(duration) == expected
