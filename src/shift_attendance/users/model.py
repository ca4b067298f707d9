from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Roster entry as seen by the attendance engine.

    Note: The roster is owned by the HR side; this is a read-only projection.
    """

    employee_id: int
    full_name: str
    email: str
    role: Role = Role.STAFF
    is_active: bool = True

    @property
    def is_exempt(self) -> bool:
        return self.role == Role.ADMIN

    def matches(self, search: str) -> bool:
        needle = search.strip().casefold()
        if not needle:
            return True
        return needle in self.full_name.casefold() or needle in self.email.casefold()
