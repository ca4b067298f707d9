from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ...core.enums import ShiftAction, ShiftState
from ..model import AttendanceSession
from .base import Transition


class BreakEndTransition(Transition):
    action = ShiftAction.BREAK_END
    allowed_from = frozenset({ShiftState.ON_BREAK})
    rejections = {
        ShiftState.NONE: "No active clock-in found",
        ShiftState.ACTIVE: "No break in progress",
    }

    def _apply(
        self,
        current: Optional[AttendanceSession],
        *,
        employee_id: int,
        now: datetime,
        notes: Optional[str],
    ) -> AttendanceSession:
        closed = current.breaks[-1].close(now)
        return replace(current, breaks=current.breaks[:-1] + (closed,), notes=notes or current.notes)
