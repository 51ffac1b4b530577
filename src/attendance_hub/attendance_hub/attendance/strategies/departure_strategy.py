from __future__ import annotations

from ...core.enums import ActionType
from ..model import DerivedAttendanceView
from .base import ActionDecision, NextActionStrategy


class DepartureStrategy(NextActionStrategy):
    """Person is inside; check them out."""

    def decide(self, view: DerivedAttendanceView) -> ActionDecision:
        return ActionDecision(action=ActionType.OUT, prompt=f"Mark {view.person.display_name} OUT (departure)")
