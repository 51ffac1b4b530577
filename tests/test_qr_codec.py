from __future__ import annotations

from src.attendance_hub.attendance_hub.attendance.resolver import resolve_person
from src.attendance_hub.attendance_hub.qr.codec import encode_person_qr, qr_payload
from src.attendance_hub.attendance_hub.roster.model import Person


def test_id_card_payload_resolves_back_to_the_person(alice):
    bob = Person(id=2, external_code="S002", display_name="Bob")

    assert resolve_person(qr_payload(bob), [alice, bob]) == bob


def test_payload_without_code_falls_back_to_id():
    person = Person(id=31, external_code=None, display_name="New Kid")

    assert resolve_person(qr_payload(person), [person]) == person


def test_encode_produces_png(alice):
    png = encode_person_qr(alice)

    assert png.startswith(b"\x89PNG\r\n\x1a\n")
