from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roster role. Admins are exempt from absence inference."""

    ADMIN = "admin"
    STAFF = "staff"


class ShiftState(str, Enum):
    """Where an employee currently is in the shift lifecycle."""

    NONE = "NONE"
    ACTIVE = "ACTIVE"
    ON_BREAK = "ON_BREAK"
    COMPLETED = "COMPLETED"


class ShiftAction(str, Enum):
    """Actions accepted from callers."""

    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"


class BreakPolicy(str, Enum):
    """Whether break time counts toward worked duration."""

    PAID = "paid"
    UNPAID = "unpaid"


class StorageBackend(str, Enum):
    MYSQL = "mysql"
    MEMORY = "memory"
