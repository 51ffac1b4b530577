from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..common.validators import clean_text, optional_int
from ..core.constants import ACCOUNTS_PATH, STUDENTS_PATH
from ..core.enums import PersonSource
from ..remote.connection import ApiConnection
from ..remote.http_base import get_json, unwrap_data
from .model import Person, display_name_for
from .repository import RosterRepository

ACTIVE = "active"


def person_from_student_row(r: Dict[str, Any]) -> Person:
    return Person(
        id=optional_int(r.get("id")),
        external_code=clean_text(r.get("student_id") or r.get("student_code")),
        display_name=display_name_for(r.get("name"), r.get("username"), r.get("student_id")),
        branch_id=optional_int(r.get("branch_id")),
        email=clean_text(r.get("email")),
        username=clean_text(r.get("username")),
        father_name=clean_text(r.get("father_name") or r.get("parent_name")),
        father_photo=clean_text(r.get("father_photo") or r.get("parent_photo")),
        mother_name=clean_text(r.get("mother_name")),
        mother_photo=clean_text(r.get("mother_photo")),
        guardian_name=clean_text(r.get("guardian_name")),
        guardian_photo=clean_text(r.get("guardian_photo")),
        class_name=clean_text(r.get("class") or r.get("class_name")),
        section=clean_text(r.get("section")),
        source=PersonSource.STUDENTS,
    )


def is_active_account(r: Dict[str, Any], role: str) -> bool:
    if r.get("role") != role:
        return False
    return ACTIVE in (r.get("status"), r.get("user_status"), r.get("approval_status"))


def person_from_account_row(r: Dict[str, Any]) -> Person:
    return Person(
        id=optional_int(r.get("id")),
        external_code=clean_text(r.get("student_id")),
        display_name=display_name_for(r.get("name"), r.get("username"), r.get("student_id")),
        branch_id=optional_int(r.get("branch_id")),
        email=clean_text(r.get("email")),
        username=clean_text(r.get("username")),
        father_name=clean_text(r.get("father_name") or r.get("parent_name")),
        father_photo=clean_text(r.get("father_photo")),
        mother_name=clean_text(r.get("mother_name")),
        mother_photo=clean_text(r.get("mother_photo")),
        guardian_name=clean_text(r.get("guardian_name")),
        guardian_photo=clean_text(r.get("guardian_photo")),
        class_name=clean_text(r.get("class_name")),
        section=clean_text(r.get("section")),
        source=PersonSource.ACCOUNTS,
    )


class ApiRosterRepository(RosterRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def list_students(self, *, branch_id: Optional[int] = None) -> Sequence[Person]:
        payload = get_json(self._conn, STUDENTS_PATH, params={"branch_id": branch_id}, source="students")
        return [person_from_student_row(r) for r in unwrap_data(payload, source="students")]

    def list_accounts(self, *, role: str, branch_id: Optional[int] = None) -> Sequence[Person]:
        payload = get_json(
            self._conn,
            ACCOUNTS_PATH,
            params={"role": role, "branch_id": branch_id},
            source="accounts",
        )
        rows: List[Dict[str, Any]] = unwrap_data(payload, source="accounts")
        return [person_from_account_row(r) for r in rows if is_active_account(r, role)]
