from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import ActionType, AttendanceStatus
from .model import DerivedAttendanceView
from .strategies.arrival_strategy import ArrivalStrategy
from .strategies.base import ActionDecision, NextActionStrategy
from .strategies.departure_strategy import DepartureStrategy
from .strategies.reentry_strategy import ReEntryStrategy


@dataclass
class NextActionStrategyFactory:
    """Factory Pattern: choose the next-action strategy from the derived state.

    Manual taps and QR scans both go through here so the two entry
    methods always agree.
    """

    def for_view(self, view: DerivedAttendanceView) -> NextActionStrategy:
        if view.status == AttendanceStatus.UNMARKED:
            return ArrivalStrategy()
        if view.status == AttendanceStatus.PRESENT and view.in_time and not view.out_time:
            return DepartureStrategy()
        if view.in_time and view.out_time:
            return ReEntryStrategy()
        return ArrivalStrategy()


def decide_next_action(view: DerivedAttendanceView) -> ActionDecision:
    return NextActionStrategyFactory().for_view(view).decide(view)


def infer_next_action(view: DerivedAttendanceView) -> ActionType:
    return decide_next_action(view).action
