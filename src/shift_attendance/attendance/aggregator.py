from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

from ..common.datetime_utils import ensure_utc
from ..core.enums import BreakPolicy
from .model import AttendanceSession, PeriodTotal, PeriodTotals
from .time_normalizer import TimeNormalizer

_ZERO = timedelta(0)


class DurationAggregator:
    """Worked-time arithmetic.

    Open sessions tick live: their duration is measured up to ``now`` on every
    call and is never cached. Breaks are paid by default; with
    ``BreakPolicy.UNPAID`` break time inside the session is subtracted.
    """

    def __init__(self, normalizer: TimeNormalizer, *, break_policy: BreakPolicy = BreakPolicy.PAID):
        self._normalizer = normalizer
        self._break_policy = BreakPolicy(break_policy)

    @property
    def break_policy(self) -> BreakPolicy:
        return self._break_policy

    def break_duration(self, session: AttendanceSession, now: datetime) -> timedelta:
        """Break time clipped to the session span; an open break counts up to now."""

        now = ensure_utc(now)
        span_end = session.check_out or now
        total = _ZERO
        for brk in session.breaks:
            start = max(brk.start, session.check_in)
            end = min(brk.end or now, span_end)
            if end > start:
                total += end - start
        return total

    def session_duration(self, session: AttendanceSession, now: datetime) -> timedelta:
        end = session.check_out or ensure_utc(now)
        worked = end - session.check_in
        if worked < _ZERO:
            # now read before a check-in stamped by another process
            return _ZERO
        if self._break_policy == BreakPolicy.UNPAID:
            worked -= self.break_duration(session, now)
        return max(worked, _ZERO)

    def period_total(
        self,
        employee_id: int,
        sessions: Iterable[AttendanceSession],
        first_day: date,
        last_day: date,
        now: datetime,
    ) -> PeriodTotal:
        """Sum sessions of one employee whose local check-in day is in [first_day, last_day]."""

        total = _ZERO
        count = 0
        for s in sessions:
            if s.employee_id != int(employee_id):
                continue
            if not first_day <= self._normalizer.local_day(s.check_in) <= last_day:
                continue
            total += self.session_duration(s, now)
            count += 1
        return PeriodTotal(
            employee_id=int(employee_id),
            first_day=first_day,
            last_day=last_day,
            total_duration=total,
            session_count=count,
        )

    def windows(self, now: datetime):
        """Local (today, week, month) day ranges containing now."""

        today = self._normalizer.local_day(now)
        week = self._normalizer.week_days(today)
        month = self._normalizer.month_days(today.year, today.month)
        return (today, today), week, month

    def period_totals(self, employee_id: int, sessions: Iterable[AttendanceSession], now: datetime) -> PeriodTotals:
        sessions = list(sessions)
        today, week, month = self.windows(now)
        return PeriodTotals(
            today=self.period_total(employee_id, sessions, *today, now),
            week=self.period_total(employee_id, sessions, *week, now),
            month=self.period_total(employee_id, sessions, *month, now),
        )
