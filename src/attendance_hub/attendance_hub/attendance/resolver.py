from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Union

from ..roster.model import Person


@dataclass(frozen=True)
class NotFound:
    """No roster match; carries what was searched for the diagnostic message."""

    searched: str
    roster_size: int


def extract_code(payload: str) -> str:
    """QR payloads are either JSON with `student_id`/`id` or a bare code."""

    text = (payload or "").strip()
    try:
        parsed = json.loads(text)
    except ValueError:
        return text
    if isinstance(parsed, dict):
        for key in ("student_id", "id"):
            value = parsed.get(key)
            if value not in (None, ""):
                return str(value).strip()
    return text


def _fields(p: Person) -> Iterable[str]:
    for value in (p.external_code, p.id, p.username):
        if value is not None:
            yield str(value).strip()


def _as_int(value: object) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _first(roster: Sequence[Person], match: Callable[[Person], bool]) -> Optional[Person]:
    return next((p for p in roster if match(p)), None)


def resolve_person(payload: str, roster: Sequence[Person]) -> Union[Person, NotFound]:
    searched = extract_code(payload)
    if not searched:
        return NotFound(searched=searched, roster_size=len(roster))

    lowered = searched.lower()
    numeric = _as_int(searched)

    passes = [
        lambda p: searched in _fields(p),
        lambda p: lowered in (f.lower() for f in _fields(p)),
        lambda p: lowered in p.display_name.lower(),
    ]
    if numeric is not None:
        passes.append(lambda p: numeric in (_as_int(p.external_code), p.id))

    for match in passes:
        found = _first(roster, match)
        if found is not None:
            return found
    return NotFound(searched=searched, roster_size=len(roster))
