from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock, truncate_seconds
from ..common.validators import clean_notes, require_int
from ..core.constants import DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT
from ..core.enums import ShiftAction
from ..core.exceptions import DomainError, NotFound, ValidationError
from ..users.model import Employee
from ..users.repository import RosterRepository
from .absence import AbsenceInferencer
from .aggregator import DurationAggregator
from .factory import TransitionFactory, parse_action
from .locks import EmployeeLocks
from .model import AttendanceSession, CurrentStatus, DayEntry, PeriodTotal, PeriodTotals
from .repository import ClockLedger
from .time_normalizer import TimeNormalizer
from .transitions.base import derive_state

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases: record shift actions and answer attendance queries.

    ``now`` always comes from the injected clock, never from the caller.
    """

    def __init__(
        self,
        ledger: ClockLedger,
        roster: RosterRepository,
        *,
        normalizer: TimeNormalizer,
        aggregator: DurationAggregator | None = None,
        inferencer: AbsenceInferencer | None = None,
        clock: Clock | None = None,
        locks: EmployeeLocks | None = None,
        transitions: TransitionFactory | None = None,
    ):
        self._ledger = ledger
        self._roster = roster
        self._normalizer = normalizer
        self._aggregator = aggregator or DurationAggregator(normalizer)
        self._inferencer = inferencer or AbsenceInferencer(normalizer)
        self._clock = clock or SystemClock()
        self._locks = locks or EmployeeLocks()
        self._transitions = transitions or TransitionFactory()

    @property
    def normalizer(self) -> TimeNormalizer:
        return self._normalizer

    @property
    def aggregator(self) -> DurationAggregator:
        return self._aggregator

    def now(self) -> datetime:
        return self._clock.now()

    def _require_employee(self, employee_id) -> Employee:
        employee_id = require_int(employee_id, "employeeId", min_value=1)
        employee = self._roster.get_by_id(employee_id)
        if not employee:
            raise NotFound(f"Employee {employee_id} not found")
        return employee

    # -- writes ---------------------------------------------------------------

    def record_action(self, employee_id, action, *, notes: Optional[str] = None) -> AttendanceSession:
        action = parse_action(action)
        employee = self._require_employee(employee_id)
        if not employee.is_active:
            raise ValidationError(f"Employee {employee.employee_id} is inactive")
        notes = clean_notes(notes)
        transition = self._transitions.for_action(action)

        with self._locks.hold(employee.employee_id):
            # Events are recorded at the precision the ledger stores.
            now = truncate_seconds(self._clock.now())
            current = self._ledger.open_session_for(employee.employee_id)
            try:
                updated = transition.apply(current, employee_id=employee.employee_id, now=now, notes=notes)
                if current is None:
                    saved = self._ledger.append(updated)
                else:
                    saved = self._ledger.update(updated)
            except DomainError as e:
                logger.warning("rejected %s for employee %s: %s", action.value, employee.employee_id, e)
                raise

        logger.info(
            "recorded %s for employee %s (session %s, state %s)",
            action.value,
            employee.employee_id,
            saved.session_id,
            saved.status.value,
        )
        return saved

    def clock_in(self, employee_id, *, notes: Optional[str] = None) -> AttendanceSession:
        return self.record_action(employee_id, ShiftAction.CLOCK_IN, notes=notes)

    def break_start(self, employee_id, *, notes: Optional[str] = None) -> AttendanceSession:
        return self.record_action(employee_id, ShiftAction.BREAK_START, notes=notes)

    def break_end(self, employee_id, *, notes: Optional[str] = None) -> AttendanceSession:
        return self.record_action(employee_id, ShiftAction.BREAK_END, notes=notes)

    def clock_out(self, employee_id, *, notes: Optional[str] = None) -> AttendanceSession:
        return self.record_action(employee_id, ShiftAction.CLOCK_OUT, notes=notes)

    # -- reads ----------------------------------------------------------------

    def current_status(self, employee_id) -> CurrentStatus:
        employee = self._require_employee(employee_id)
        session = self._ledger.open_session_for(employee.employee_id)
        state = derive_state(session)
        if session is None:
            return CurrentStatus(employee_id=employee.employee_id, state=state)

        open_break = session.open_break
        return CurrentStatus(
            employee_id=employee.employee_id,
            state=state,
            session_id=session.session_id,
            open_since=session.check_in,
            on_break_since=open_break.start if open_break else None,
        )

    def get_session(self, session_id) -> AttendanceSession:
        session_id = require_int(session_id, "sessionId", min_value=1)
        session = self._ledger.get_by_id(session_id)
        if not session:
            raise NotFound(f"Session {session_id} not found")
        return session

    def roster_by_id(self) -> Dict[int, Employee]:
        return {e.employee_id: e for e in self._roster.list_roster()}

    def list_day(self, day: date, search: Optional[str] = None) -> List[DayEntry]:
        """Sessions checked in on a local day (newest first), then synthesized absences."""

        now = self._clock.now()
        roster = self.roster_by_id()
        sessions = sorted(
            self._ledger.sessions_on(day, self._normalizer),
            key=lambda s: (s.check_in, s.session_id),
            reverse=True,
        )
        absences = self._inferencer.infer(day, roster.values(), sessions, now)

        entries: List[DayEntry] = [*sessions, *absences]
        if search and search.strip():
            entries = [e for e in entries if e.employee_id in roster and roster[e.employee_id].matches(search)]
        return entries

    def list_range(self, first_day: date, last_day: date, search: Optional[str] = None) -> List[AttendanceSession]:
        start, end = self._normalizer.range_bounds_utc(first_day, last_day)
        sessions = sorted(
            self._ledger.sessions_between(start, end),
            key=lambda s: (s.check_in, s.session_id),
            reverse=True,
        )
        if search and search.strip():
            roster = self.roster_by_id()
            sessions = [s for s in sessions if s.employee_id in roster and roster[s.employee_id].matches(search)]
        return sessions

    def list_month(self, year: int, month: int, search: Optional[str] = None) -> List[AttendanceSession]:
        return self.list_range(*self._normalizer.month_days(year, month), search=search)

    def list_year(self, year: int, search: Optional[str] = None) -> List[AttendanceSession]:
        return self.list_range(*self._normalizer.year_days(year), search=search)

    def history(self, employee_id, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceSession]:
        employee = self._require_employee(employee_id)
        limit = require_int(limit, "limit", min_value=1, max_value=MAX_HISTORY_LIMIT)
        return self._ledger.recent_for(employee.employee_id, limit)

    def period_total(self, employee_id, first_day: date, last_day: date) -> PeriodTotal:
        employee = self._require_employee(employee_id)
        now = self._clock.now()
        start, end = self._normalizer.range_bounds_utc(first_day, last_day)
        sessions = self._ledger.sessions_for(employee.employee_id, start, end)
        return self._aggregator.period_total(employee.employee_id, sessions, first_day, last_day, now)

    def period_totals(self, employee_id) -> PeriodTotals:
        employee = self._require_employee(employee_id)
        now = self._clock.now()
        today, week, month = self._aggregator.windows(now)
        first_day = min(week[0], month[0])
        last_day = max(week[1], month[1])
        start, end = self._normalizer.range_bounds_utc(first_day, last_day)
        sessions = self._ledger.sessions_for(employee.employee_id, start, end)
        return self._aggregator.period_totals(employee.employee_id, sessions, now)
