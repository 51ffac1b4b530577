from __future__ import annotations

from typing import List, Sequence

from .model import Person


def same_person(a: Person, b: Person) -> bool:
    """Identity check used for de-duplication, in strict priority order.

    1. external code, when both sides have one;
    2. email, when neither side has an external code;
    3. raw id, when neither side has an external code or an email.

    Two independently auto-incremented tables routinely share numeric ids,
    so the raw id is never compared while a stronger key is present.
    """

    if a.external_code and b.external_code:
        return a.external_code == b.external_code
    if a.external_code or b.external_code:
        return False

    if a.email and b.email:
        return a.email == b.email
    if a.email or b.email:
        return False

    if a.has_usable_id and b.has_usable_id:
        return a.id == b.id
    return False


def has_identity(person: Person) -> bool:
    return bool(person.external_code or person.email or person.has_usable_id)


def identity_key(person: Person) -> str:
    """Stable lookup key following the same priority as `same_person`."""

    if person.external_code:
        return f"code:{person.external_code}"
    if person.email:
        return f"email:{person.email}"
    if person.has_usable_id:
        return f"id:{person.id}"
    # No identity fields: only the object itself identifies it.
    return f"anon:{id(person)}"


def merge_rosters(primary: Sequence[Person], secondary: Sequence[Person]) -> List[Person]:
    """Concatenate both rosters (primary first) and keep the first occurrence of each person."""

    combined = [*primary, *secondary]
    merged: List[Person] = []
    for index, candidate in enumerate(combined):
        if not has_identity(candidate):
            merged.append(candidate)
            continue
        first = next(i for i, other in enumerate(combined) if same_person(other, candidate))
        if first == index:
            merged.append(candidate)
    return merged
