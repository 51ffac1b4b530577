from __future__ import annotations

import logging
from typing import List, Optional

from ..core.constants import DEFAULT_STUDENT_ROLE
from ..core.exceptions import SourceUnavailable
from .merge import merge_rosters
from .model import Person
from .repository import RosterRepository

logger = logging.getLogger(__name__)


class RosterService:
    def __init__(self, roster: RosterRepository, *, role: str = DEFAULT_STUDENT_ROLE):
        self._roster = roster
        self._role = role

    def load_roster(self, *, branch_id: Optional[int] = None) -> List[Person]:
        """Fetch both directories and merge them.

        Either source failing is non-fatal and counts as an empty contribution.
        """

        try:
            primary = list(self._roster.list_students(branch_id=branch_id))
        except SourceUnavailable as exc:
            logger.warning("Roster source degraded to empty: %s", exc)
            primary = []

        try:
            secondary = list(self._roster.list_accounts(role=self._role, branch_id=branch_id))
        except SourceUnavailable as exc:
            logger.warning("Accounts source degraded to empty: %s", exc)
            secondary = []

        merged = merge_rosters(primary, secondary)
        logger.info(
            "Roster loaded branch=%s students=%d accounts=%d merged=%d",
            branch_id, len(primary), len(secondary), len(merged),
        )
        return merged
