from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class RosterRepository(Protocol):
    """Roster lookup consumed by the attendance engine.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_roster(self) -> Sequence[Employee]:
        """All employees, active or not, ordered by id."""

        raise NotImplementedError
