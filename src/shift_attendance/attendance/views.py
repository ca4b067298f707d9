from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..common.datetime_utils import to_iso_utc
from ..users.model import Employee
from .aggregator import DurationAggregator
from .model import AbsenceEntry, AttendanceSession, CurrentStatus, DayEntry, PeriodTotals, format_hours
from .time_normalizer import TimeNormalizer


class AttendanceViews:
    """JSON-ready shapes for the HTTP layer.

    UTC ISO-8601 for machines, ``HH:MM`` in the deployment offset for people.
    """

    def __init__(self, normalizer: TimeNormalizer, aggregator: DurationAggregator):
        self._normalizer = normalizer
        self._aggregator = aggregator

    @staticmethod
    def _employee_fields(employee: Optional[Employee]) -> dict:
        return {
            "employeeName": employee.full_name if employee else None,
            "employeeEmail": employee.email if employee else None,
        }

    def session(self, s: AttendanceSession, *, now: datetime, employee: Optional[Employee] = None) -> dict:
        return {
            "kind": s.kind,
            "id": s.session_id,
            "employeeId": s.employee_id,
            **self._employee_fields(employee),
            "checkIn": to_iso_utc(s.check_in),
            "checkOut": to_iso_utc(s.check_out),
            "breaks": [{"start": to_iso_utc(b.start), "end": to_iso_utc(b.end)} for b in s.breaks],
            "status": s.status.value,
            "notes": s.notes,
            "localDay": self._normalizer.local_day(s.check_in).isoformat(),
            "checkInLocal": self._normalizer.format_time(s.check_in),
            "checkOutLocal": self._normalizer.format_time(s.check_out),
            "durationHours": format_hours(self._aggregator.session_duration(s, now)),
        }

    @staticmethod
    def absence(a: AbsenceEntry, *, employee: Optional[Employee] = None) -> dict:
        return {
            "kind": a.kind,
            "employeeId": a.employee_id,
            **AttendanceViews._employee_fields(employee),
            "day": a.day.isoformat(),
            "status": "ABSENT",
        }

    def entries(self, items: Iterable[DayEntry], *, now: datetime, roster: Dict[int, Employee]) -> List[dict]:
        out: List[dict] = []
        for item in items:
            employee = roster.get(item.employee_id)
            if isinstance(item, AbsenceEntry):
                out.append(self.absence(item, employee=employee))
            else:
                out.append(self.session(item, now=now, employee=employee))
        return out

    @staticmethod
    def status(st: CurrentStatus) -> dict:
        return {
            "employeeId": st.employee_id,
            "state": st.state.value,
            "sessionId": st.session_id,
            "openSince": to_iso_utc(st.open_since),
            "onBreakSince": to_iso_utc(st.on_break_since),
        }

    @staticmethod
    def totals(t: PeriodTotals) -> dict:
        return {
            "today": t.today.hours,
            "week": t.week.hours,
            "month": t.month.hours,
            "recordCount": t.month.session_count,
        }
