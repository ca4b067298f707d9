from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import ShiftAction, ShiftState
from ..model import AttendanceSession
from .base import Transition


class ClockInTransition(Transition):
    """Open a new session. Only legal with no open session."""

    action = ShiftAction.CLOCK_IN
    allowed_from = frozenset({ShiftState.NONE})
    rejections = {
        ShiftState.ACTIVE: "Already clocked in",
        ShiftState.ON_BREAK: "Already clocked in (currently on break)",
    }

    def _apply(
        self,
        current: Optional[AttendanceSession],
        *,
        employee_id: int,
        now: datetime,
        notes: Optional[str],
    ) -> AttendanceSession:
        return AttendanceSession(session_id=None, employee_id=int(employee_id), check_in=now, notes=notes)
