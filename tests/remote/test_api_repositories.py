from __future__ import annotations

from datetime import date
from typing import Any, Dict, Tuple

import pytest
import requests

from src.attendance_hub.attendance_hub.attendance.api_attendance_repository import (
    ApiAttendanceEventRepository,
    event_from_row,
)
from src.attendance_hub.attendance_hub.attendance.model import AttendanceWrite
from src.attendance_hub.attendance_hub.branches.api_branch_repository import ApiBranchRepository
from src.attendance_hub.attendance_hub.core.enums import ActionType, GuardianType, PersonSource
from src.attendance_hub.attendance_hub.core.exceptions import (
    SourceUnavailable,
    WriteNetworkFailure,
    WriteRejected,
)
from src.attendance_hub.attendance_hub.remote.connection import ApiConfig, ApiConnection
from src.attendance_hub.attendance_hub.roster.api_roster_repository import ApiRosterRepository

BASE = "http://backend.test/api"


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, routes: Dict[Tuple[str, str], Any]):
        self.routes = routes
        self.headers: Dict[str, str] = {}
        self.calls = []

    def _respond(self, method: str, url: str):
        result = self.routes[(method, url)]
        if isinstance(result, requests.RequestException):
            raise result
        if isinstance(result, FakeResponse):
            return result
        return FakeResponse(result)

    def get(self, url, params=None, timeout=None):
        self.calls.append(("GET", url, params, timeout))
        return self._respond("GET", url)

    def post(self, url, json=None, timeout=None):
        self.calls.append(("POST", url, json, timeout))
        return self._respond("POST", url)

    def close(self):
        pass


def _conn(session: FakeSession, token: str = "") -> ApiConnection:
    return ApiConnection(ApiConfig(base_url=BASE + "/", token=token, timeout_seconds=3), session_factory=lambda: session)


def _write() -> AttendanceWrite:
    return AttendanceWrite(
        person_key=1,
        date=date(2026, 2, 2),
        action=ActionType.IN,
        time="09:15",
        guardian_type=GuardianType.MOTHER,
        guardian_name="Jane",
        marked_by_name="Ms. Lee",
        marked_by_role="Teacher",
    )


def test_students_are_mapped_and_branch_filter_passed():
    session = FakeSession({
        ("GET", BASE + "/students"): {
            "success": True,
            "data": [{"id": "7", "student_id": "TNHK25007", "name": "Alice", "branch_id": "2", "mother_name": "Jane"}],
        }
    })
    people = ApiRosterRepository(_conn(session, token="abc")).list_students(branch_id=2)

    assert people[0].id == 7
    assert people[0].external_code == "TNHK25007"
    assert people[0].mother_name == "Jane"
    assert session.calls[0][2] == {"branch_id": 2}
    assert session.calls[0][3] == 3.0
    assert session.headers["Authorization"] == "Bearer abc"


def test_accounts_keep_only_active_accounts_of_the_role():
    session = FakeSession({
        ("GET", BASE + "/accounts"): {
            "success": True,
            "data": [
                {"id": 1, "role": "Student", "status": "active", "name": "Active"},
                {"id": 2, "role": "Student", "approval_status": "active", "username": "approved"},
                {"id": 3, "role": "Student", "status": "inactive", "name": "Gone"},
                {"id": 4, "role": "Teacher", "status": "active", "name": "Teacher"},
            ],
        }
    })
    people = ApiRosterRepository(_conn(session)).list_accounts(role="Student")

    assert [p.display_name for p in people] == ["Active", "approved"]
    assert all(p.source == PersonSource.ACCOUNTS for p in people)
    assert session.calls[0][2] == {"role": "Student"}


def test_success_false_is_source_unavailable():
    session = FakeSession({("GET", BASE + "/students"): {"success": False, "message": "DB down"}})

    with pytest.raises(SourceUnavailable) as exc:
        ApiRosterRepository(_conn(session)).list_students()
    assert exc.value.source == "students"


def test_timeout_is_source_unavailable():
    session = FakeSession({("GET", BASE + "/attendance"): requests.Timeout("slow")})

    with pytest.raises(SourceUnavailable) as exc:
        ApiAttendanceEventRepository(_conn(session)).list_for_date(date(2026, 2, 2))
    assert exc.value.reason == "request timed out"


def test_non_json_body_is_source_unavailable():
    session = FakeSession({("GET", BASE + "/branches"): FakeResponse(ValueError("Expecting value"))})

    with pytest.raises(SourceUnavailable):
        ApiBranchRepository(_conn(session)).list_all()


def test_events_are_parsed_and_other_days_dropped():
    session = FakeSession({
        ("GET", BASE + "/attendance"): {
            "success": True,
            "data": [
                {"student_id": 1, "student_code": "S001", "date": "2026-02-02", "in_time": "08:30",
                 "in_guardian_type": "Father", "in_guardian_name": "John", "status": "present"},
                {"student_id": 2, "date": "2026-02-01", "in_time": "08:00"},
            ],
        }
    })
    events = ApiAttendanceEventRepository(_conn(session)).list_for_date(date(2026, 2, 2), branch_id=None)

    assert len(events) == 1
    assert events[0].person_key == "1"
    assert events[0].person_code == "S001"
    assert events[0].in_guardian_name == "John"
    assert session.calls[0][2] == {"date": "2026-02-02"}


def test_null_student_id_falls_back_to_person_id():
    event = event_from_row({"student_id": None, "person_id": 7, "date": "2026-02-02"})

    assert event.person_key == "7"


def test_mark_posts_the_write_payload():
    session = FakeSession({("POST", BASE + "/attendance"): {"success": True}})
    ApiAttendanceEventRepository(_conn(session)).mark(_write())

    body = session.calls[0][2]
    assert body == {
        "personId": 1,
        "date": "2026-02-02",
        "action": "in",
        "time": "09:15",
        "guardianType": "Mother",
        "guardianName": "Jane",
        "markedByName": "Ms. Lee",
        "markedByRole": "Teacher",
    }


def test_mark_rejected_carries_server_message():
    session = FakeSession({("POST", BASE + "/attendance"): FakeResponse({"success": False, "message": "Student not found"}, 400)})

    with pytest.raises(WriteRejected) as exc:
        ApiAttendanceEventRepository(_conn(session)).mark(_write())
    assert exc.value.message == "Student not found"


def test_mark_rejected_without_message_uses_generic_text():
    session = FakeSession({("POST", BASE + "/attendance"): {"success": False}})

    with pytest.raises(WriteRejected) as exc:
        ApiAttendanceEventRepository(_conn(session)).mark(_write())
    assert exc.value.message == WriteRejected.GENERIC_MESSAGE


def test_mark_transport_failure_is_distinct_from_rejection():
    session = FakeSession({("POST", BASE + "/attendance"): requests.ConnectionError("refused")})

    with pytest.raises(WriteNetworkFailure) as exc:
        ApiAttendanceEventRepository(_conn(session)).mark(_write())
    assert not isinstance(exc.value, WriteRejected)


def test_branches_listed():
    session = FakeSession({
        ("GET", BASE + "/branches"): {"success": True, "data": [{"id": "1", "name": "Main"}, {"name": "no id"}]}
    })
    branches = ApiBranchRepository(_conn(session)).list_all()

    assert [(b.branch_id, b.name) for b in branches] == [(1, "Main")]
