from __future__ import annotations

import itertools
import threading
from datetime import datetime
from typing import Dict, Optional, Sequence

from ..common.datetime_utils import ensure_utc
from ..core.exceptions import InvalidTransition, NotFound, ValidationError
from .model import AttendanceSession
from .repository import ClockLedger


class InMemoryClockLedger(ClockLedger):
    """Thread-safe process-local ledger.

    Reads return tuples copied under the lock, i.e. a snapshot as of the call.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._by_id: Dict[int, AttendanceSession] = {}
        self._open_by_employee: Dict[int, int] = {}
        self._ids = itertools.count(1)

    def open_session_for(self, employee_id: int) -> Optional[AttendanceSession]:
        with self._lock:
            session_id = self._open_by_employee.get(int(employee_id))
            return self._by_id[session_id] if session_id is not None else None

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        with self._lock:
            return self._by_id.get(int(session_id))

    def append(self, session: AttendanceSession) -> AttendanceSession:
        if session.session_id is not None:
            raise ValidationError("New sessions must not carry an id")
        with self._lock:
            if session.is_open and session.employee_id in self._open_by_employee:
                raise InvalidTransition("Already clocked in")
            stored = session.with_id(next(self._ids))
            self._by_id[stored.session_id] = stored
            if stored.is_open:
                self._open_by_employee[stored.employee_id] = stored.session_id
            return stored

    def update(self, session: AttendanceSession) -> AttendanceSession:
        with self._lock:
            existing = self._by_id.get(session.session_id) if session.session_id is not None else None
            if existing is None:
                raise NotFound(f"Session {session.session_id} not found")
            if existing.employee_id != session.employee_id or existing.check_in != session.check_in:
                raise ValidationError("Session owner and check-in are immutable")
            if not existing.is_open:
                raise ValidationError("Completed sessions cannot be modified")

            self._by_id[session.session_id] = session
            if session.is_open:
                self._open_by_employee[session.employee_id] = session.session_id
            else:
                self._open_by_employee.pop(session.employee_id, None)
            return session

    def _select(self, start: datetime, end: datetime, employee_id: Optional[int] = None) -> Sequence[AttendanceSession]:
        start, end = ensure_utc(start), ensure_utc(end)
        with self._lock:
            rows = tuple(self._by_id.values())
        found = [
            s
            for s in rows
            if start <= s.check_in < end and (employee_id is None or s.employee_id == int(employee_id))
        ]
        found.sort(key=lambda s: (s.check_in, s.session_id))
        return found

    def sessions_for(self, employee_id: int, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        return self._select(start, end, employee_id)

    def sessions_between(self, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        return self._select(start, end)

    def recent_for(self, employee_id: int, limit: int) -> Sequence[AttendanceSession]:
        with self._lock:
            items = [s for s in self._by_id.values() if s.employee_id == int(employee_id)]
        items.sort(key=lambda s: (s.check_in, s.session_id), reverse=True)
        return items[: int(limit)]
