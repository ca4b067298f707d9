from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .attendance.absence import AbsenceInferencer
from .attendance.aggregator import DurationAggregator
from .attendance.memory_repository import InMemoryClockLedger
from .attendance.mysql_attendance_repository import MySQLClockLedger
from .attendance.repository import ClockLedger
from .attendance.service import AttendanceService
from .attendance.time_normalizer import TimeNormalizer
from .attendance.views import AttendanceViews
from .common.datetime_utils import Clock, SystemClock
from .core.constants import DEFAULT_UTC_OFFSET_MINUTES, DEFAULT_WEEK_START
from .core.enums import BreakPolicy, Role, StorageBackend
from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .users.memory_repository import InMemoryRosterRepository
from .users.model import Employee
from .users.mysql_roster_repository import MySQLRosterRepository
from .users.repository import RosterRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    roster_repo: RosterRepository
    attendance_ledger: ClockLedger

    normalizer: TimeNormalizer
    aggregator: DurationAggregator
    attendance_service: AttendanceService
    attendance_views: AttendanceViews


def _parse_enum(enum_cls, value, setting: str):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{setting} must be one of: {allowed} (got {value!r})") from None


def roster_from_dicts(rows: Iterable[dict]) -> list[Employee]:
    return [
        Employee(
            employee_id=int(r["employee_id"]),
            full_name=str(r["full_name"]),
            email=str(r.get("email", "")),
            role=Role(r.get("role", Role.STAFF.value)),
            is_active=bool(r.get("is_active", True)),
        )
        for r in rows
    ]


def build_container(
    *,
    db_config: Optional[dict] = None,
    backend: str = StorageBackend.MYSQL.value,
    utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES,
    week_start: int = DEFAULT_WEEK_START,
    break_policy: str = BreakPolicy.PAID.value,
    roster: Iterable[Employee] = (),
    clock: Clock | None = None,
) -> Container:
    backend = _parse_enum(StorageBackend, backend, "STORAGE_BACKEND")
    policy = _parse_enum(BreakPolicy, break_policy, "BREAK_POLICY")

    conn: Optional[DatabaseConnection] = None
    if backend == StorageBackend.MYSQL:
        if not db_config:
            raise ValidationError("DB_CONFIG is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        roster_repo: RosterRepository = MySQLRosterRepository(conn)
        ledger: ClockLedger = MySQLClockLedger(conn)
    else:
        roster_repo = InMemoryRosterRepository(roster)
        ledger = InMemoryClockLedger()

    normalizer = TimeNormalizer(utc_offset_minutes, week_start=week_start)
    aggregator = DurationAggregator(normalizer, break_policy=policy)
    attendance_service = AttendanceService(
        ledger,
        roster_repo,
        normalizer=normalizer,
        aggregator=aggregator,
        inferencer=AbsenceInferencer(normalizer),
        clock=clock or SystemClock(),
    )

    return Container(
        conn=conn,
        roster_repo=roster_repo,
        attendance_ledger=ledger,
        normalizer=normalizer,
        aggregator=aggregator,
        attendance_service=attendance_service,
        attendance_views=AttendanceViews(normalizer, aggregator),
    )
