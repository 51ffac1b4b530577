from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import UNKNOWN_PERSON_NAME
from ..core.enums import PersonSource


@dataclass(frozen=True)
class Person:
    """A student or staff member on the roster.

    `external_code` is the human-readable roster code (e.g. TNHK25001) and
    may differ from the directory-assigned numeric `id`.
    """

    id: Optional[int]
    external_code: Optional[str]
    display_name: str
    branch_id: Optional[int] = None
    email: Optional[str] = None
    username: Optional[str] = None
    father_name: Optional[str] = None
    father_photo: Optional[str] = None
    mother_name: Optional[str] = None
    mother_photo: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_photo: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    source: PersonSource = PersonSource.STUDENTS

    @property
    def has_usable_id(self) -> bool:
        return self.id is not None and self.id != 0

    @property
    def write_key(self) -> Optional[object]:
        """Identifier sent with attendance writes: numeric id, else the roster code."""
        if self.has_usable_id:
            return self.id
        return self.external_code


def display_name_for(*candidates: Optional[str]) -> str:
    for value in candidates:
        if value and str(value).strip():
            return str(value).strip()
    return UNKNOWN_PERSON_NAME
