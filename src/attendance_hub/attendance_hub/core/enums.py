from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Derived daily status shown on the attendance board."""

    UNMARKED = "unmarked"
    PRESENT = "present"
    ABSENT = "absent"


class ActionType(str, Enum):
    """Check-in or check-out."""

    IN = "IN"
    OUT = "OUT"

    @property
    def wire_value(self) -> str:
        return self.value.lower()


class EntryMethod(str, Enum):
    MANUAL = "Manual"
    QR_SCANNER = "QR Scanner"


class GuardianType(str, Enum):
    """Who accompanied the person at drop-off or pick-up."""

    FATHER = "Father"
    MOTHER = "Mother"
    GUARDIAN = "Guardian"
    CAPTAIN = "Captain"
    SYSTEM = "System"


class WorkflowState(str, Enum):
    """States of the guardian-attribution workflow."""

    IDLE = "IDLE"
    ACTION_SELECTED = "ACTION_SELECTED"
    GUARDIAN_PENDING = "GUARDIAN_PENDING"
    COMMITTING = "COMMITTING"


class PersonSource(str, Enum):
    STUDENTS = "students"
    ACCOUNTS = "accounts"
