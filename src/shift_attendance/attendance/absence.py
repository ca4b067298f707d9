from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List

from ..users.model import Employee
from .model import AbsenceEntry, AttendanceSession
from .time_normalizer import TimeNormalizer


class AbsenceInferencer:
    """Flag roster members with no session on a local day.

    Exempt (admin) and inactive employees are never flagged, and a day that
    has not started yet locally yields nothing.
    """

    def __init__(self, normalizer: TimeNormalizer):
        self._normalizer = normalizer

    def can_infer(self, day: date, now: datetime) -> bool:
        return day <= self._normalizer.local_day(now)

    def infer(
        self,
        day: date,
        roster: Iterable[Employee],
        sessions: Iterable[AttendanceSession],
        now: datetime,
    ) -> List[AbsenceEntry]:
        if not self.can_infer(day, now):
            return []

        present = {s.employee_id for s in sessions if self._normalizer.local_day(s.check_in) == day}
        return [
            AbsenceEntry(employee_id=e.employee_id, day=day)
            for e in roster
            if e.is_active and not e.is_exempt and e.employee_id not in present
        ]
