from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import mysql.connector
import pytest

from shift_attendance.attendance.model import AttendanceSession, BreakInterval
from shift_attendance.attendance.mysql_attendance_repository import MySQLClockLedger
from shift_attendance.core.exceptions import InvalidTransition, StorageError, ValidationError


class FakeCursor:
    """Returns scripted result sets, one per execute()."""

    def __init__(self, script, lastrowid=None):
        self._script = list(script)
        self._rows = []
        self.executed = []
        self.lastrowid = lastrowid

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))
        result = self._script.pop(0) if self._script else []
        if isinstance(result, Exception):
            raise result
        self._rows = result

    def fetchall(self):
        return self._rows

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        pass


class FakeConn:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeFactory:
    def __init__(self, script, lastrowid=None):
        self.cursor = FakeCursor(script, lastrowid=lastrowid)
        self.conn = FakeConn(self.cursor)

    def connect(self):
        return self.conn


T0 = datetime(2026, 2, 2, 4, 0, tzinfo=timezone.utc)


def test_open_session_is_hydrated_with_breaks_as_utc():
    factory = FakeFactory(
        [
            [{"session_id": 5, "employee_id": 2, "check_in_time": datetime(2026, 2, 2, 4, 0),
              "check_out_time": None, "notes": "hi"}],
            [{"session_id": 5, "break_start": datetime(2026, 2, 2, 6, 0), "break_end": None}],
        ]
    )

    s = MySQLClockLedger(factory).open_session_for(2)

    assert s.session_id == 5
    assert s.check_in == T0
    assert s.open_break == BreakInterval(start=datetime(2026, 2, 2, 6, 0, tzinfo=timezone.utc))
    assert "check_out_time IS NULL" in factory.cursor.executed[0][0]


def test_append_stores_session_and_assigns_id():
    factory = FakeFactory([[], []], lastrowid=11)

    stored = MySQLClockLedger(factory).append(AttendanceSession(session_id=None, employee_id=2, check_in=T0))

    assert stored.session_id == 11
    assert factory.conn.committed
    insert_sql, params = factory.cursor.executed[0]
    assert insert_sql.startswith("INSERT INTO attendance_sessions")
    assert params[1] == datetime(2026, 2, 2, 4, 0)


def test_duplicate_open_session_maps_to_invalid_transition():
    dup = mysql.connector.IntegrityError(msg="Duplicate entry '2' for key 'attendance_sessions.uq_sessions_one_open'")
    factory = FakeFactory([dup])

    with pytest.raises(InvalidTransition):
        MySQLClockLedger(factory).append(AttendanceSession(session_id=None, employee_id=2, check_in=T0))

    assert factory.conn.rolled_back
    assert not factory.conn.committed


def test_other_driver_errors_become_storage_errors():
    factory = FakeFactory([mysql.connector.DatabaseError(msg="lost connection")])

    with pytest.raises(StorageError):
        MySQLClockLedger(factory).append(AttendanceSession(session_id=None, employee_id=2, check_in=T0))


def test_update_refuses_completed_session():
    factory = FakeFactory(
        [[{"employee_id": 2, "check_in_time": datetime(2026, 2, 2, 4, 0),
           "check_out_time": datetime(2026, 2, 2, 5, 0)}]]
    )
    session = AttendanceSession(session_id=5, employee_id=2, check_in=T0)

    with pytest.raises(ValidationError):
        MySQLClockLedger(factory).update(replace(session, notes="late edit"))

    assert factory.conn.rolled_back


def test_append_truncates_sub_second_check_in():
    factory = FakeFactory([[], []], lastrowid=12)

    MySQLClockLedger(factory).append(
        AttendanceSession(session_id=None, employee_id=2, check_in=T0 + timedelta(milliseconds=600))
    )

    _, params = factory.cursor.executed[0]
    assert params[1] == datetime(2026, 2, 2, 4, 0, 0)


def test_update_matches_stored_check_in_and_truncates_check_out():
    factory = FakeFactory(
        [[{"employee_id": 2, "check_in_time": datetime(2026, 2, 2, 4, 0), "check_out_time": None}]]
    )
    session = AttendanceSession(
        session_id=5,
        employee_id=2,
        check_in=T0 + timedelta(milliseconds=600),
        check_out=T0 + timedelta(seconds=1, milliseconds=200),
    )

    MySQLClockLedger(factory).update(session)

    assert factory.conn.committed
    update_sql, params = factory.cursor.executed[1]
    assert update_sql.startswith("UPDATE attendance_sessions")
    assert params[0] == datetime(2026, 2, 2, 4, 0, 1)
