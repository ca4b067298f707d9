from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from shift_attendance.attendance.memory_repository import InMemoryClockLedger
from shift_attendance.attendance.service import AttendanceService
from shift_attendance.attendance.time_normalizer import TimeNormalizer
from shift_attendance.core.enums import Role
from shift_attendance.users.memory_repository import InMemoryRosterRepository
from shift_attendance.users.model import Employee


class FixedClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> datetime:
        self._now += timedelta(**kwargs)
        return self._now

    def set(self, value: datetime) -> None:
        self._now = value


@pytest.fixture
def fixed_now() -> datetime:
    # Monday 2026-02-02 09:00 at UTC+5
    return datetime(2026, 2, 2, 4, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def roster() -> list[Employee]:
    return [
        Employee(employee_id=1, full_name="Admin Demo", email="admin@example.com", role=Role.ADMIN),
        Employee(employee_id=2, full_name="Ayesha Khan", email="ayesha@example.com"),
        Employee(employee_id=3, full_name="Bilal Ahmed", email="bilal@example.com"),
        Employee(employee_id=4, full_name="Sara Malik", email="sara@example.com"),
        Employee(employee_id=5, full_name="Usman Tariq", email="usman@example.com"),
        Employee(employee_id=6, full_name="Zara Former", email="zara@example.com", is_active=False),
    ]


@pytest.fixture
def normalizer() -> TimeNormalizer:
    return TimeNormalizer(300)


@pytest.fixture
def ledger() -> InMemoryClockLedger:
    return InMemoryClockLedger()


@pytest.fixture
def service(ledger, roster, normalizer, clock) -> AttendanceService:
    return AttendanceService(ledger, InMemoryRosterRepository(roster), normalizer=normalizer, clock=clock)
