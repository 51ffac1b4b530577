from __future__ import annotations

from typing import Sequence

from ..common.validators import optional_int
from ..core.constants import BRANCHES_PATH
from ..remote.connection import ApiConnection
from ..remote.http_base import get_json, unwrap_data
from .model import Branch
from .repository import BranchRepository


class ApiBranchRepository(BranchRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def list_all(self) -> Sequence[Branch]:
        payload = get_json(self._conn, BRANCHES_PATH, source="branches")
        rows = unwrap_data(payload, source="branches")
        return [
            Branch(branch_id=int(r["id"]), name=str(r.get("name") or r["id"]))
            for r in rows
            if optional_int(r.get("id")) is not None
        ]
