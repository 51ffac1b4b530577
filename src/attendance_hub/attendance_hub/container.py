from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.api_attendance_repository import ApiAttendanceEventRepository
from .attendance.repository import AttendanceEventRepository
from .attendance.service import AttendanceService
from .branches.api_branch_repository import ApiBranchRepository
from .branches.repository import BranchRepository
from .branches.service import BranchService
from .common.datetime_utils import Clock, now_local
from .core.constants import DEFAULT_STUDENT_ROLE, DEFAULT_TIMEOUT_SECONDS
from .remote.connection import ApiConfig, ApiConnection
from .roster.api_roster_repository import ApiRosterRepository
from .roster.repository import RosterRepository
from .roster.service import RosterService


@dataclass(frozen=True)
class Container:
    conn: Optional[ApiConnection]
    clock: Clock

    roster_repo: RosterRepository
    events_repo: AttendanceEventRepository
    branches_repo: BranchRepository

    roster_service: RosterService
    branch_service: BranchService
    attendance_service: AttendanceService

    def close(self) -> None:
        self.attendance_service.close()
        if self.conn is not None:
            self.conn.close()


def wire_container(
    *,
    roster_repo: RosterRepository,
    events_repo: AttendanceEventRepository,
    branches_repo: BranchRepository,
    conn: Optional[ApiConnection] = None,
    clock: Clock = now_local,
    student_role: str = DEFAULT_STUDENT_ROLE,
    poll_interval_seconds: float = 0,
) -> Container:
    roster_service = RosterService(roster_repo, role=student_role)
    branch_service = BranchService(branches_repo)
    attendance_service = AttendanceService(
        roster_service,
        events_repo,
        clock=clock,
        poll_interval_seconds=poll_interval_seconds,
    )
    return Container(
        conn=conn,
        clock=clock,
        roster_repo=roster_repo,
        events_repo=events_repo,
        branches_repo=branches_repo,
        roster_service=roster_service,
        branch_service=branch_service,
        attendance_service=attendance_service,
    )


def build_container(
    *,
    api_config: dict,
    clock: Clock = now_local,
    student_role: str = DEFAULT_STUDENT_ROLE,
    poll_interval_seconds: float = 0,
) -> Container:
    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        token=str(api_config.get("token") or ""),
        timeout_seconds=float(api_config.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
    )
    conn = ApiConnection.get_instance(config)

    return wire_container(
        roster_repo=ApiRosterRepository(conn),
        events_repo=ApiAttendanceEventRepository(conn),
        branches_repo=ApiBranchRepository(conn),
        conn=conn,
        clock=clock,
        student_role=student_role,
        poll_interval_seconds=poll_interval_seconds,
    )
