from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.validators import clean_text
from ..core.constants import ATTENDANCE_PATH
from ..core.exceptions import SourceUnavailable, WriteNetworkFailure, WriteRejected
from ..remote.connection import ApiConnection
from ..remote.http_base import get_json, post_json, unwrap_data
from .model import AttendanceEvent, AttendanceWrite
from .repository import AttendanceEventRepository

logger = logging.getLogger(__name__)


def _row_date(value: Any) -> Optional[date]:
    text = clean_text(value)
    if not text:
        return None
    try:
        return parse_iso_date(text[:10])
    except ValueError:
        return None


def event_from_row(r: Dict[str, Any]) -> AttendanceEvent:
    key = r.get("student_id") or r.get("person_id")
    return AttendanceEvent(
        person_key=clean_text(key),
        date=_row_date(r.get("date")),
        person_code=clean_text(r.get("student_code")),
        in_time=clean_text(r.get("in_time")),
        out_time=clean_text(r.get("out_time")),
        in_guardian_type=clean_text(r.get("in_guardian_type")),
        in_guardian_name=clean_text(r.get("in_guardian_name")),
        out_guardian_type=clean_text(r.get("out_guardian_type")),
        out_guardian_name=clean_text(r.get("out_guardian_name")),
        status=clean_text(r.get("status")),
        in_by=clean_text(r.get("in_by")),
        out_by=clean_text(r.get("out_by")),
    )


class ApiAttendanceEventRepository(AttendanceEventRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def list_for_date(self, work_date: date, *, branch_id: Optional[int] = None) -> Sequence[AttendanceEvent]:
        payload = get_json(
            self._conn,
            ATTENDANCE_PATH,
            params={"date": format_iso_date(work_date), "branch_id": branch_id},
            source="attendance",
        )
        events = [event_from_row(r) for r in unwrap_data(payload, source="attendance")]
        # Rows for other days are ignored even if the backend returns them.
        return [e for e in events if e.date is None or e.date == work_date]

    def mark(self, write: AttendanceWrite) -> None:
        try:
            payload = post_json(self._conn, ATTENDANCE_PATH, body=write.to_payload(), source="attendance")
        except SourceUnavailable as exc:
            logger.warning("Attendance write transport failure: %s", exc.reason)
            raise WriteNetworkFailure() from exc

        if not payload.get("success"):
            message = clean_text(payload.get("message"))
            logger.warning("Attendance write rejected: %s", message or "<no message>")
            raise WriteRejected(message)
