from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Person


class RosterRepository(Protocol):
    def list_students(self, *, branch_id: Optional[int] = None) -> Sequence[Person]:
        """Dedicated roster source (students/staff directory)."""

        raise NotImplementedError

    def list_accounts(self, *, role: str, branch_id: Optional[int] = None) -> Sequence[Person]:
        """Generic accounts directory, filtered to active accounts of `role`."""

        raise NotImplementedError
