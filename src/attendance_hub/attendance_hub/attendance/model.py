from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Optional

from ..core.constants import UNMARKED_PLACEHOLDER
from ..core.enums import ActionType, AttendanceStatus, EntryMethod, GuardianType
from ..roster.merge import identity_key
from ..roster.model import Person


@dataclass(frozen=True)
class AttendanceEvent:
    """One person's in/out record for one day, as reported by the backend.

    `person_key` is whatever identifier the write used (numeric id or roster
    code); `person_code` is the roster code joined in by the backend, if any.
    """

    person_key: Optional[str]
    date: Optional[date]
    person_code: Optional[str] = None
    in_time: Optional[str] = None
    out_time: Optional[str] = None
    in_guardian_type: Optional[str] = None
    in_guardian_name: Optional[str] = None
    out_guardian_type: Optional[str] = None
    out_guardian_name: Optional[str] = None
    status: Optional[str] = None
    in_by: Optional[str] = None
    out_by: Optional[str] = None


@dataclass(frozen=True)
class DerivedAttendanceView:
    """Read-model for one roster row: identity plus the derived daily state."""

    person: Person
    status: AttendanceStatus = AttendanceStatus.UNMARKED
    in_time: Optional[str] = None
    out_time: Optional[str] = None
    in_by: str = UNMARKED_PLACEHOLDER
    out_by: str = UNMARKED_PLACEHOLDER
    guardian_type: Optional[str] = None
    guardian_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        p = self.person
        return {
            "key": identity_key(p),
            "id": p.id,
            "external_code": p.external_code,
            "name": p.display_name,
            "username": p.username,
            "branch_id": p.branch_id,
            "class_name": p.class_name,
            "section": p.section,
            "source": p.source.value,
            "status": self.status.value,
            "in_time": self.in_time,
            "out_time": self.out_time,
            "in_by": self.in_by,
            "out_by": self.out_by,
            "guardian_type": self.guardian_type,
            "guardian_name": self.guardian_name,
        }


@dataclass(frozen=True)
class GuardianOption:
    guardian_type: GuardianType
    name: str
    photo: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"guardian_type": self.guardian_type.value, "name": self.name, "photo": self.photo}


@dataclass(frozen=True)
class PendingAction:
    """Transient state between a tap/scan and a completed or cancelled commit."""

    view: DerivedAttendanceView
    action_type: ActionType
    method: EntryMethod
    prompt: str = ""
    guardian: Optional[GuardianOption] = None

    @property
    def person(self) -> Person:
        return self.view.person


@dataclass(frozen=True)
class AttendanceWrite:
    person_key: Any
    date: date
    action: ActionType
    time: str
    guardian_type: GuardianType
    guardian_name: str
    marked_by_name: str
    marked_by_role: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "personId": self.person_key,
            "date": self.date.strftime("%Y-%m-%d"),
            "action": self.action.wire_value,
            "time": self.time,
            "guardianType": self.guardian_type.value,
            "guardianName": self.guardian_name,
            "markedByName": self.marked_by_name,
            "markedByRole": self.marked_by_role,
        }


@dataclass(frozen=True)
class DailySummary:
    total: int
    present: int
    absent: int
    unmarked: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class Operator:
    """Staff member performing the marking (recorded as markedBy)."""

    name: str
    role: str
