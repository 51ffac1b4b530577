from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import ActionType
from ..model import DerivedAttendanceView


@dataclass(frozen=True)
class ActionDecision:
    action: ActionType
    prompt: str


class NextActionStrategy(ABC):
    """Strategy Pattern: encapsulate which action a tap or scan should perform."""

    @abstractmethod
    def decide(self, view: DerivedAttendanceView) -> ActionDecision:
        raise NotImplementedError
