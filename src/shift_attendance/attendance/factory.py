from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from ..core.enums import ShiftAction
from ..core.exceptions import ValidationError
from .transitions.base import Transition
from .transitions.break_end import BreakEndTransition
from .transitions.break_start import BreakStartTransition
from .transitions.clock_in import ClockInTransition
from .transitions.clock_out import ClockOutTransition


def parse_action(value) -> ShiftAction:
    if isinstance(value, ShiftAction):
        return value
    try:
        return ShiftAction(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(a.value for a in ShiftAction)
        raise ValidationError(f"Invalid type: {value!r} (expected one of {allowed})") from None


@dataclass
class TransitionFactory:
    """Factory Pattern: pick the transition strategy for an action."""

    _strategies: Dict[ShiftAction, Transition] = field(
        default_factory=lambda: {
            ShiftAction.CLOCK_IN: ClockInTransition(),
            ShiftAction.BREAK_START: BreakStartTransition(),
            ShiftAction.BREAK_END: BreakEndTransition(),
            ShiftAction.CLOCK_OUT: ClockOutTransition(),
        }
    )

    def for_action(self, action) -> Transition:
        return self._strategies[parse_action(action)]
