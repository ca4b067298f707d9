from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ...core.enums import ShiftAction, ShiftState
from ..model import AttendanceSession
from .base import Transition


class ClockOutTransition(Transition):
    """Close the session; an outstanding break is closed at the same instant."""

    action = ShiftAction.CLOCK_OUT
    allowed_from = frozenset({ShiftState.ACTIVE, ShiftState.ON_BREAK})
    rejections = {
        ShiftState.NONE: "No active clock-in found",
    }

    def _apply(
        self,
        current: Optional[AttendanceSession],
        *,
        employee_id: int,
        now: datetime,
        notes: Optional[str],
    ) -> AttendanceSession:
        breaks = current.breaks
        if current.open_break is not None:
            breaks = breaks[:-1] + (breaks[-1].close(now),)
        return replace(current, breaks=breaks, check_out=now, notes=notes or current.notes)
