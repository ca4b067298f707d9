from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import ROUND_HALF_UP, Decimal
from datetime import date, datetime, timedelta
from typing import ClassVar, Optional, Tuple, Union

from ..common.datetime_utils import ensure_utc
from ..core.constants import HOURS_DISPLAY_QUANTUM
from ..core.enums import ShiftState
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class BreakInterval:
    """One break inside a session. No end means the break is still running."""

    start: datetime
    end: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "start", ensure_utc(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", ensure_utc(self.end))
            if self.end <= self.start:
                raise ValidationError("Break end must be after break start")

    @property
    def is_open(self) -> bool:
        return self.end is None

    def close(self, at: datetime) -> "BreakInterval":
        return BreakInterval(start=self.start, end=at)


@dataclass(frozen=True)
class AttendanceSession:
    """One clock-in to clock-out interval for one employee.

    Instances are immutable; every transition produces a new value, so a
    rejected transition can never leave a half-applied record behind.
    All timestamps are aware UTC datetimes.
    """

    kind: ClassVar[str] = "session"

    session_id: Optional[int]
    employee_id: int
    check_in: datetime
    check_out: Optional[datetime] = None
    breaks: Tuple[BreakInterval, ...] = field(default_factory=tuple)
    notes: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "check_in", ensure_utc(self.check_in))
        if self.check_out is not None:
            object.__setattr__(self, "check_out", ensure_utc(self.check_out))
        object.__setattr__(self, "breaks", tuple(self.breaks))
        self._validate()

    def _validate(self) -> None:
        if self.check_out is not None and self.check_out <= self.check_in:
            raise ValidationError("Check-out must be after check-in")

        previous_end: Optional[datetime] = None
        for index, brk in enumerate(self.breaks):
            if brk.start < self.check_in:
                raise ValidationError("Break cannot start before check-in")
            if previous_end is not None and brk.start < previous_end:
                raise ValidationError("Breaks must not overlap")
            if brk.is_open:
                if index != len(self.breaks) - 1:
                    raise ValidationError("Only the latest break may be open")
                if self.check_out is not None:
                    raise ValidationError("A closed session cannot have an open break")
            elif self.check_out is not None and brk.end > self.check_out:
                raise ValidationError("Break cannot end after check-out")
            previous_end = brk.end

    @property
    def is_open(self) -> bool:
        return self.check_out is None

    @property
    def open_break(self) -> Optional[BreakInterval]:
        if self.breaks and self.breaks[-1].is_open:
            return self.breaks[-1]
        return None

    @property
    def status(self) -> ShiftState:
        if self.check_out is not None:
            return ShiftState.COMPLETED
        if self.open_break is not None:
            return ShiftState.ON_BREAK
        return ShiftState.ACTIVE

    @property
    def last_event_at(self) -> datetime:
        stamps = [self.check_in]
        for brk in self.breaks:
            stamps.append(brk.start)
            if brk.end is not None:
                stamps.append(brk.end)
        if self.check_out is not None:
            stamps.append(self.check_out)
        return max(stamps)

    def with_id(self, session_id: int) -> "AttendanceSession":
        return replace(self, session_id=int(session_id))


@dataclass(frozen=True)
class AbsenceEntry:
    """Synthetic day entry for a roster member with no session that day. Never stored."""

    kind: ClassVar[str] = "absence"

    employee_id: int
    day: date


DayEntry = Union[AttendanceSession, AbsenceEntry]


def format_hours(duration: timedelta) -> str:
    """Decimal hours with one decimal place, half-up (e.g. ``"7.5"``)."""

    hours = Decimal(str(duration.total_seconds())) / Decimal(3600)
    return str(hours.quantize(Decimal(HOURS_DISPLAY_QUANTUM), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class PeriodTotal:
    """Worked time for one employee over an inclusive range of local days."""

    employee_id: int
    first_day: date
    last_day: date
    total_duration: timedelta
    session_count: int

    @property
    def hours(self) -> str:
        return format_hours(self.total_duration)


@dataclass(frozen=True)
class PeriodTotals:
    today: PeriodTotal
    week: PeriodTotal
    month: PeriodTotal


@dataclass(frozen=True)
class CurrentStatus:
    employee_id: int
    state: ShiftState
    session_id: Optional[int] = None
    open_since: Optional[datetime] = None
    on_break_since: Optional[datetime] = None
