from __future__ import annotations

from datetime import date

from src.attendance_hub.attendance_hub.attendance.model import AttendanceEvent
from src.attendance_hub.attendance_hub.attendance.overlay import (
    apply_attendance_overlay,
    baseline_views,
    format_by,
    search_views,
    summarize,
)
from src.attendance_hub.attendance_hub.core.enums import AttendanceStatus
from src.attendance_hub.attendance_hub.roster.model import Person

DAY = date(2026, 2, 2)


def _roster():
    return [
        Person(id=1, external_code="S001", display_name="Alice", username="alice"),
        Person(id=2, external_code="S002", display_name="Bob"),
        Person(id=None, external_code="S003", display_name="Cara"),
        Person(id=4, external_code=None, display_name="Dan"),
    ]


def test_no_events_gives_unmarked_baseline():
    views = apply_attendance_overlay(_roster(), [])

    assert len(views) == 4
    assert all(v.status == AttendanceStatus.UNMARKED for v in views)
    assert all(v.in_time is None and v.out_time is None for v in views)
    assert all(v.in_by == "-" and v.out_by == "-" for v in views)


def test_in_time_wins_over_conflicting_server_status():
    events = [AttendanceEvent(person_key="1", date=DAY, in_time="08:30", status="absent")]

    views = apply_attendance_overlay(_roster(), events)

    assert views[0].status == AttendanceStatus.PRESENT
    assert views[0].in_time == "08:30"


def test_in_and_out_time_stays_present():
    events = [AttendanceEvent(person_key="2", date=DAY, in_time="08:00", out_time="15:00")]

    view = apply_attendance_overlay(_roster(), events)[1]

    assert view.status == AttendanceStatus.PRESENT
    assert view.out_time == "15:00"


def test_explicit_server_status_used_without_in_time():
    events = [
        AttendanceEvent(person_key="1", date=DAY, status="absent"),
        AttendanceEvent(person_key="2", date=DAY, out_time="12:00", status="present"),
    ]

    views = apply_attendance_overlay(_roster(), events)

    assert views[0].status == AttendanceStatus.ABSENT
    assert views[1].status == AttendanceStatus.PRESENT


def test_unknown_server_status_keeps_baseline():
    events = [AttendanceEvent(person_key="1", date=DAY, status="late")]

    assert apply_attendance_overlay(_roster(), events)[0].status == AttendanceStatus.UNMARKED


def test_event_matched_by_external_code_when_written_with_code():
    events = [AttendanceEvent(person_key="S003", date=DAY, in_time="08:10")]

    views = apply_attendance_overlay(_roster(), events)

    assert views[2].status == AttendanceStatus.PRESENT
    assert [v.status for v in views].count(AttendanceStatus.PRESENT) == 1


def test_event_indexed_under_joined_student_code():
    events = [AttendanceEvent(person_key="999", person_code="S002", date=DAY, in_time="08:45")]

    assert apply_attendance_overlay(_roster(), events)[1].in_time == "08:45"


def test_id_probe_takes_precedence_over_code():
    events = [
        AttendanceEvent(person_key="S001", date=DAY, in_time="07:00"),
        AttendanceEvent(person_key="1", date=DAY, in_time="09:00"),
    ]

    assert apply_attendance_overlay(_roster(), events)[0].in_time == "09:00"


def test_zero_id_is_not_probed():
    person = Person(id=0, external_code="S000", display_name="Zoe")
    events = [
        AttendanceEvent(person_key="0", date=DAY, in_time="07:00"),
        AttendanceEvent(person_key="S000", date=DAY, in_time="09:00"),
    ]

    assert apply_attendance_overlay([person], events)[0].in_time == "09:00"
    assert apply_attendance_overlay([person], events[:1])[0].status == AttendanceStatus.UNMARKED


def test_by_fields_formatting():
    events = [
        AttendanceEvent(
            person_key="1",
            date=DAY,
            in_time="08:30",
            in_guardian_type="Mother",
            in_guardian_name="Jane",
            out_time="14:00",
            out_by="Ms. Lee",
        ),
        AttendanceEvent(person_key="4", date=DAY, in_time="08:00", in_guardian_name="Uncle Sam"),
    ]

    views = apply_attendance_overlay(_roster(), events)

    assert views[0].in_by == "Jane (Mother)"
    assert views[0].out_by == "Ms. Lee"
    assert views[0].guardian_name == "Jane"
    assert views[3].in_by == "Uncle Sam (Guardian)"
    assert views[3].out_by == "-"


def test_format_by_fallbacks():
    assert format_by("Jane", "Mother", "legacy") == "Jane (Mother)"
    assert format_by(None, "Mother", "legacy") == "legacy"
    assert format_by(None, None, None) == "-"


def test_one_view_per_person_even_with_duplicate_events():
    roster = _roster()
    events = [
        AttendanceEvent(person_key="1", date=DAY, in_time="08:00"),
        AttendanceEvent(person_key="1", date=DAY, in_time="10:00"),
        AttendanceEvent(person_key="77", date=DAY, in_time="10:00"),
    ]

    views = apply_attendance_overlay(roster, events)

    assert [v.person for v in views] == roster
    assert all(v.status in set(AttendanceStatus) for v in views)


def test_summary_and_search():
    events = [
        AttendanceEvent(person_key="1", date=DAY, in_time="08:00"),
        AttendanceEvent(person_key="2", date=DAY, status="absent"),
    ]
    views = apply_attendance_overlay(_roster(), events)

    s = summarize(views)
    assert (s.total, s.present, s.absent, s.unmarked) == (4, 1, 1, 2)

    assert [v.person.display_name for v in search_views(views, "ALI")] == ["Alice"]
    assert [v.person.display_name for v in search_views(views, "s003")] == ["Cara"]
    assert len(search_views(views, "  ")) == 4
    assert len(baseline_views(_roster())) == 4
