from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_hub.attendance_hub.roster.model import Person


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 15, 0)


@pytest.fixture
def fixed_clock(fixed_now):
    return lambda: fixed_now


@pytest.fixture
def alice() -> Person:
    return Person(
        id=1,
        external_code="S001",
        display_name="Alice",
        branch_id=1,
        username="alice",
        mother_name="Jane",
        father_name="John",
    )
