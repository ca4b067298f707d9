from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

from .model import AttendanceSession

if TYPE_CHECKING:
    from .time_normalizer import TimeNormalizer


class ClockLedger(Protocol):
    """Append-only store of attendance sessions.

    Sessions are appended on clock-in and replaced in place by later
    transitions of the same record; nothing is ever deleted.
    """

    def open_session_for(self, employee_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def append(self, session: AttendanceSession) -> AttendanceSession:
        """Store a new open session and return it with its assigned id.

        Raises InvalidTransition if the employee already has an open session.
        """

        raise NotImplementedError

    def update(self, session: AttendanceSession) -> AttendanceSession:
        """Replace a stored session (breaks, check-out, notes). Raises NotFound."""

        raise NotImplementedError

    def sessions_for(self, employee_id: int, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        """Sessions of one employee with ``start <= check_in < end``, oldest first."""

        raise NotImplementedError

    def sessions_between(self, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        """Sessions of all employees with ``start <= check_in < end``, oldest first."""

        raise NotImplementedError

    def recent_for(self, employee_id: int, limit: int) -> Sequence[AttendanceSession]:
        """Latest sessions of one employee, newest first."""

        raise NotImplementedError

    def sessions_on(self, day: date, normalizer: "TimeNormalizer") -> Sequence[AttendanceSession]:
        start, end = normalizer.day_bounds_utc(day)
        return self.sessions_between(start, end)
