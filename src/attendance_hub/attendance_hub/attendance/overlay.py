from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from ..core.constants import UNMARKED_PLACEHOLDER
from ..core.enums import ActionType, AttendanceStatus, GuardianType
from ..roster.model import Person
from .model import AttendanceEvent, AttendanceWrite, DerivedAttendanceView, DailySummary

logger = logging.getLogger(__name__)


def baseline_views(roster: Sequence[Person]) -> List[DerivedAttendanceView]:
    """Every person unmarked, no times, no guardian."""
    return [DerivedAttendanceView(person=p) for p in roster]


def format_by(guardian_name: Optional[str], guardian_type: Optional[str], legacy: Optional[str]) -> str:
    if guardian_name:
        return f"{guardian_name} ({guardian_type or GuardianType.GUARDIAN.value})"
    if legacy:
        return legacy
    return UNMARKED_PLACEHOLDER


def _index_events(events: Sequence[AttendanceEvent]) -> Dict[str, AttendanceEvent]:
    # First record wins; the backend lists newest first.
    lookup: Dict[str, AttendanceEvent] = {}
    for ev in events:
        for key in (ev.person_key, ev.person_code):
            if key is not None and str(key) not in lookup:
                lookup[str(key)] = ev
    return lookup


def _find_event(lookup: Dict[str, AttendanceEvent], person: Person) -> Optional[AttendanceEvent]:
    if person.has_usable_id and str(person.id) in lookup:
        return lookup[str(person.id)]
    if person.external_code and person.external_code in lookup:
        return lookup[person.external_code]
    return None


def _server_status(raw: Optional[str]) -> Optional[AttendanceStatus]:
    if not raw:
        return None
    try:
        return AttendanceStatus(str(raw).strip().lower())
    except ValueError:
        logger.warning("Ignoring unknown server attendance status %r", raw)
        return None


def derive_status(event: AttendanceEvent, current: AttendanceStatus) -> AttendanceStatus:
    """An in-time is proof of attendance; otherwise trust an explicit server status."""

    if event.in_time:
        return AttendanceStatus.PRESENT
    return _server_status(event.status) or current


def overlay_event(view: DerivedAttendanceView, event: AttendanceEvent) -> DerivedAttendanceView:
    return replace(
        view,
        status=derive_status(event, view.status),
        in_time=event.in_time or view.in_time,
        out_time=event.out_time or view.out_time,
        in_by=format_by(event.in_guardian_name, event.in_guardian_type, event.in_by or view.in_by),
        out_by=format_by(event.out_guardian_name, event.out_guardian_type, event.out_by or view.out_by),
        guardian_type=event.in_guardian_type or event.out_guardian_type or view.guardian_type,
        guardian_name=event.in_guardian_name or event.out_guardian_name or view.guardian_name,
    )


def apply_attendance_overlay(
    roster: Sequence[Person], events: Sequence[AttendanceEvent]
) -> List[DerivedAttendanceView]:
    """One derived view per roster person, overlaid with the day's events."""

    lookup = _index_events(events)
    views: List[DerivedAttendanceView] = []
    for view in baseline_views(roster):
        event = _find_event(lookup, view.person)
        views.append(overlay_event(view, event) if event else view)
    return views


def apply_commit(view: DerivedAttendanceView, write: AttendanceWrite) -> DerivedAttendanceView:
    """Optimistic projection of a successful write onto the local view."""

    by = format_by(write.guardian_name, write.guardian_type.value, None)
    if write.action == ActionType.IN:
        return replace(
            view,
            status=AttendanceStatus.PRESENT,
            in_time=write.time,
            in_by=by,
            guardian_type=write.guardian_type.value,
            guardian_name=write.guardian_name,
        )
    return replace(
        view,
        status=AttendanceStatus.PRESENT,
        out_time=write.time,
        out_by=by,
        guardian_type=write.guardian_type.value,
        guardian_name=write.guardian_name,
    )


def summarize(views: Sequence[DerivedAttendanceView]) -> DailySummary:
    return DailySummary(
        total=len(views),
        present=sum(1 for v in views if v.status == AttendanceStatus.PRESENT),
        absent=sum(1 for v in views if v.status == AttendanceStatus.ABSENT),
        unmarked=sum(1 for v in views if v.status == AttendanceStatus.UNMARKED),
    )


def search_views(views: Sequence[DerivedAttendanceView], query: Optional[str]) -> List[DerivedAttendanceView]:
    """Case-insensitive substring search on name, roster code and username."""

    needle = (query or "").strip().lower()
    if not needle:
        return list(views)
    out: List[DerivedAttendanceView] = []
    for v in views:
        p = v.person
        haystacks = (p.display_name, p.external_code, p.username)
        if any(h and needle in h.lower() for h in haystacks):
            out.append(v)
    return out
