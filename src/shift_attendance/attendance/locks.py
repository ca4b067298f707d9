from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class EmployeeLocks:
    """One mutex per employee id, created on demand and dropped when unused.

    Transitions for the same employee run one at a time; different employees
    never wait on each other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: Dict[int, List] = {}

    @contextmanager
    def hold(self, employee_id: int) -> Iterator[None]:
        key = int(employee_id)
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._entries[key] = entry
            entry[1] += 1

        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
