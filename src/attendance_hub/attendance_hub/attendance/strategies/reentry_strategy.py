from __future__ import annotations

from ...core.enums import ActionType
from ..model import DerivedAttendanceView
from .base import ActionDecision, NextActionStrategy


class ReEntryStrategy(NextActionStrategy):
    """Same-day return after a completed in/out cycle."""

    def decide(self, view: DerivedAttendanceView) -> ActionDecision:
        return ActionDecision(action=ActionType.IN, prompt=f"Mark {view.person.display_name} IN again (re-entry)")
