from __future__ import annotations

import pytest

from src.attendance_hub.attendance_hub.branches.model import Branch
from src.attendance_hub.attendance_hub.branches.service import BranchService, parse_branch_filter
from src.attendance_hub.attendance_hub.core.exceptions import SourceUnavailable, ValidationError


class InMemoryBranches:
    def __init__(self, branches=None, down=False):
        self._branches = branches or []
        self._down = down

    def list_all(self):
        if self._down:
            raise SourceUnavailable("branches", "timeout")
        return self._branches


def test_options_start_with_all():
    svc = BranchService(InMemoryBranches([Branch(1, "Main"), Branch(2, "East")]))

    assert svc.list_branch_options() == [
        {"id": "All", "name": "All"},
        {"id": 1, "name": "Main"},
        {"id": 2, "name": "East"},
    ]


def test_unavailable_branches_still_offer_all():
    assert BranchService(InMemoryBranches(down=True)).list_branch_options() == [{"id": "All", "name": "All"}]


@pytest.mark.parametrize("value, expected", [(None, None), ("", None), ("All", None), ("3", 3), (4, 4)])
def test_parse_branch_filter(value, expected):
    assert parse_branch_filter(value) == expected


def test_parse_branch_filter_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_branch_filter("north")
