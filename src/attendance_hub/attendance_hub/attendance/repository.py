from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent, AttendanceWrite


class AttendanceEventRepository(Protocol):
    def list_for_date(self, work_date: date, *, branch_id: Optional[int] = None) -> Sequence[AttendanceEvent]:
        """Raises SourceUnavailable when the backend cannot be read."""

        raise NotImplementedError

    def mark(self, write: AttendanceWrite) -> None:
        """Raises WriteRejected (success=false) or WriteNetworkFailure (transport)."""

        raise NotImplementedError
