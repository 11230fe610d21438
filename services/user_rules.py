"""
Pure user rules: age, birth date range and the two field merges.

Nothing here touches storage; today's date and the minimum age are passed in
so the same inputs always give the same answer.
"""
from datetime import date

from core.errors import InvalidAgeError, InvalidDateRangeError
from models.user import User, UserDraft, UserPatch

MUTABLE_FIELDS = ("email", "first_name", "last_name", "birth_date", "address", "phone_number")


def calculate_age(birth_date: date, today: date) -> int:
    """Complete years between birth_date and today (floored)."""
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


def validate_age(birth_date: date, min_age: int, today: date) -> None:
    if calculate_age(birth_date, today) < min_age:
        raise InvalidAgeError(f"User must be at least {min_age} years old")


def validate_date_range(start: date, end: date) -> None:
    if start > end:
        raise InvalidDateRangeError("Start date must be before end date")


def merge_full(existing: User, draft: UserDraft, min_age: int, today: date) -> User:
    """Replace every mutable field of existing with the draft's values.

    Optional fields the draft leaves empty are cleared. The id is kept.
    """
    validate_age(draft.birth_date, min_age, today)
    return User(id=existing.id, **draft.model_dump(include=set(MUTABLE_FIELDS)))


def merge_partial(existing: User, patch: UserPatch, min_age: int, today: date) -> User:
    """Apply only the fields the patch supplies; the rest keep their current values."""
    if patch.supplied("birth_date"):
        validate_age(patch.birth_date, min_age, today)
    changes = {field: getattr(patch, field) for field in MUTABLE_FIELDS if patch.supplied(field)}
    return existing.model_copy(update=changes)
