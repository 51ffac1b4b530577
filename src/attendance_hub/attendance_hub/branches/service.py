from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..core.constants import ALL_BRANCHES
from ..core.exceptions import SourceUnavailable, ValidationError
from .repository import BranchRepository

logger = logging.getLogger(__name__)


def parse_branch_filter(value: Any) -> Optional[int]:
    """None, '' and 'All' mean no branch filter."""

    if value is None:
        return None
    text = str(value).strip()
    if not text or text == ALL_BRANCHES:
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid branch_id: {text!r}") from exc


class BranchService:
    def __init__(self, branches: BranchRepository):
        self._branches = branches

    def list_branch_options(self) -> List[Dict[str, Any]]:
        options: List[Dict[str, Any]] = [{"id": ALL_BRANCHES, "name": ALL_BRANCHES}]
        try:
            branches = self._branches.list_all()
        except SourceUnavailable as exc:
            logger.warning("Branch list unavailable: %s", exc)
            return options
        options.extend({"id": b.branch_id, "name": b.name} for b in branches)
        return options
