from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ...core.enums import ShiftAction, ShiftState
from ..model import AttendanceSession, BreakInterval
from .base import Transition


class BreakStartTransition(Transition):
    action = ShiftAction.BREAK_START
    allowed_from = frozenset({ShiftState.ACTIVE})
    rejections = {
        ShiftState.NONE: "No active clock-in found",
        ShiftState.ON_BREAK: "Already on break",
    }

    def _apply(
        self,
        current: Optional[AttendanceSession],
        *,
        employee_id: int,
        now: datetime,
        notes: Optional[str],
    ) -> AttendanceSession:
        return replace(
            current,
            breaks=current.breaks + (BreakInterval(start=now),),
            notes=notes or current.notes,
        )
