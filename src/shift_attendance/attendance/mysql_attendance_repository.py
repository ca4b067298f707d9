from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

import mysql.connector

from ..common.datetime_utils import to_storage
from ..core.exceptions import InvalidTransition, NotFound, StorageError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceSession, BreakInterval
from .repository import ClockLedger

_SESSION_COLUMNS = "session_id, employee_id, check_in_time, check_out_time, notes"


class MySQLClockLedger(ClockLedger):
    """Sessions in ``attendance_sessions``, breaks in ``attendance_breaks``.

    DATETIME columns hold naive UTC. A unique index on a generated column
    rejects a second open session for the same employee even across processes.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_breaks(self, cur, session_ids: List[int]) -> Dict[int, List[BreakInterval]]:
        if not session_ids:
            return {}
        placeholders = ",".join(["%s"] * len(session_ids))
        cur.execute(
            f"""
            SELECT session_id, break_start, break_end
            FROM attendance_breaks
            WHERE session_id IN ({placeholders})
            ORDER BY session_id ASC, seq ASC
            """,
            tuple(session_ids),
        )
        out: Dict[int, List[BreakInterval]] = {}
        for r in fetchall(cur):
            out.setdefault(int(r["session_id"]), []).append(
                BreakInterval(start=r["break_start"], end=r.get("break_end"))
            )
        return out

    def _hydrate(self, cur, rows: List[dict]) -> List[AttendanceSession]:
        breaks = self._load_breaks(cur, [int(r["session_id"]) for r in rows])
        return [
            AttendanceSession(
                session_id=int(r["session_id"]),
                employee_id=int(r["employee_id"]),
                check_in=r["check_in_time"],
                check_out=r.get("check_out_time"),
                breaks=tuple(breaks.get(int(r["session_id"]), ())),
                notes=r.get("notes"),
            )
            for r in rows
        ]

    def _query(self, sql: str, params: tuple) -> List[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return self._hydrate(cur, fetchall(cur))

    def open_session_for(self, employee_id: int) -> Optional[AttendanceSession]:
        found = self._query(
            f"""
            SELECT {_SESSION_COLUMNS}
            FROM attendance_sessions
            WHERE employee_id=%s AND check_out_time IS NULL
            ORDER BY check_in_time DESC
            LIMIT 1
            """,
            (int(employee_id),),
        )
        return found[0] if found else None

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        found = self._query(
            f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE session_id=%s",
            (int(session_id),),
        )
        return found[0] if found else None

    def _write_breaks(self, cur, session: AttendanceSession) -> None:
        cur.execute("DELETE FROM attendance_breaks WHERE session_id=%s", (session.session_id,))
        for seq, brk in enumerate(session.breaks, start=1):
            cur.execute(
                """
                INSERT INTO attendance_breaks(session_id, seq, break_start, break_end)
                VALUES(%s,%s,%s,%s)
                """,
                (
                    session.session_id,
                    seq,
                    to_storage(brk.start),
                    to_storage(brk.end) if brk.end else None,
                ),
            )

    def append(self, session: AttendanceSession) -> AttendanceSession:
        if session.session_id is not None:
            raise ValidationError("New sessions must not carry an id")
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_sessions(employee_id, check_in_time, check_out_time, notes)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (
                        session.employee_id,
                        to_storage(session.check_in),
                        to_storage(session.check_out) if session.check_out else None,
                        session.notes,
                    ),
                )
                stored = session.with_id(int(cur.lastrowid))
                self._write_breaks(cur, stored)
                return stored
        except mysql.connector.IntegrityError as e:
            if "uq_sessions_one_open" in str(e):
                raise InvalidTransition("Already clocked in") from e
            raise StorageError(f"Could not store session: {e}") from e
        except mysql.connector.Error as e:
            raise StorageError(f"Could not store session: {e}") from e

    def update(self, session: AttendanceSession) -> AttendanceSession:
        if session.session_id is None:
            raise NotFound("Session has no id")
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT employee_id, check_in_time, check_out_time
                    FROM attendance_sessions
                    WHERE session_id=%s
                    FOR UPDATE
                    """,
                    (session.session_id,),
                )
                row = fetchone(cur)
                if not row:
                    raise NotFound(f"Session {session.session_id} not found")
                if int(row["employee_id"]) != session.employee_id or row["check_in_time"] != to_storage(session.check_in):
                    raise ValidationError("Session owner and check-in are immutable")
                if row.get("check_out_time") is not None:
                    raise ValidationError("Completed sessions cannot be modified")

                cur.execute(
                    """
                    UPDATE attendance_sessions
                    SET check_out_time=%s, notes=%s
                    WHERE session_id=%s
                    """,
                    (
                        to_storage(session.check_out) if session.check_out else None,
                        session.notes,
                        session.session_id,
                    ),
                )
                self._write_breaks(cur, session)
                return session
        except mysql.connector.Error as e:
            raise StorageError(f"Could not update session {session.session_id}: {e}") from e

    def sessions_for(self, employee_id: int, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        return self._query(
            f"""
            SELECT {_SESSION_COLUMNS}
            FROM attendance_sessions
            WHERE employee_id=%s AND check_in_time >= %s AND check_in_time < %s
            ORDER BY check_in_time ASC, session_id ASC
            """,
            (int(employee_id), to_storage(start), to_storage(end)),
        )

    def sessions_between(self, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        return self._query(
            f"""
            SELECT {_SESSION_COLUMNS}
            FROM attendance_sessions
            WHERE check_in_time >= %s AND check_in_time < %s
            ORDER BY check_in_time ASC, session_id ASC
            """,
            (to_storage(start), to_storage(end)),
        )

    def recent_for(self, employee_id: int, limit: int) -> Sequence[AttendanceSession]:
        return self._query(
            f"""
            SELECT {_SESSION_COLUMNS}
            FROM attendance_sessions
            WHERE employee_id=%s
            ORDER BY check_in_time DESC, session_id DESC
            LIMIT %s
            """,
            (int(employee_id), int(limit)),
        )
