from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .model import Employee
from .repository import RosterRepository


class InMemoryRosterRepository(RosterRepository):
    def __init__(self, employees: Iterable[Employee] = ()):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def list_roster(self) -> Sequence[Employee]:
        return [self._by_id[k] for k in sorted(self._by_id)]
