from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

from ...core.enums import ShiftAction, ShiftState
from ...core.exceptions import InvalidTransition, ValidationError
from ..model import AttendanceSession


def derive_state(session: Optional[AttendanceSession]) -> ShiftState:
    """State of an employee given their open session (or None)."""

    if session is None or not session.is_open:
        return ShiftState.NONE
    return session.status


class Transition(ABC):
    """Strategy Pattern: one class per shift action.

    ``apply`` never mutates its input; it returns the session as it should be
    stored after the action.
    """

    action: ClassVar[ShiftAction]
    allowed_from: ClassVar[FrozenSet[ShiftState]]
    rejections: ClassVar[dict] = {}

    def check(self, current: Optional[AttendanceSession]) -> ShiftState:
        state = derive_state(current)
        if state not in self.allowed_from:
            message = self.rejections.get(state) or f"{self.action.value} is not allowed while {state.value}"
            raise InvalidTransition(message, state=state, action=self.action)
        return state

    def apply(
        self,
        current: Optional[AttendanceSession],
        *,
        employee_id: int,
        now: datetime,
        notes: Optional[str] = None,
    ) -> AttendanceSession:
        self.check(current)
        if current is not None and now < current.last_event_at:
            raise ValidationError("Timestamp is earlier than the last recorded event")
        return self._apply(current, employee_id=employee_id, now=now, notes=notes)

    @abstractmethod
    def _apply(
        self,
        current: Optional[AttendanceSession],
        *,
        employee_id: int,
        now: datetime,
        notes: Optional[str],
    ) -> AttendanceSession:
        raise NotImplementedError
