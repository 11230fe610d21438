# api/user_validation.py
"""
Field validation for request bodies.

Each function returns every problem it finds as {wire field name: message}
instead of stopping at the first one; ensure_valid() turns a non-empty result
into a ValidationFailedError (400).
"""
import re
from datetime import date
from typing import Dict

from core.errors import ValidationFailedError
from models.schemas import UserIn, UserPatchIn

EMAIL_RE = re.compile(
    r"^[\w!#$%&’*+/=?`{|}~^-]+(?:\.[\w!#$%&’*+/=?`{|}~^-]+)*@(?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{2,6}$",
    re.ASCII,
)
PHONE_RE = re.compile(r"^\+[0-9]{10,15}$")

EMAIL_INVALID = "Email is not valid."
EMAIL_BLANK = "must not be blank"
FIRST_NAME_BLANK = "First name should not be empty."
LAST_NAME_BLANK = "Last name should not be empty."
BIRTH_DATE_MISSING = "Birth date should not be empty."
BIRTH_DATE_NOT_PAST = "Birth date should be in the past."
PHONE_INVALID = "Phone number is invalid"


def _blank(value) -> bool:
    return value is None or not value.strip()


def _check_formats(errors: Dict[str, str], email, birth_date, phone_number, today: date) -> None:
    if email is not None and "email" not in errors and not EMAIL_RE.fullmatch(email):
        errors["email"] = EMAIL_INVALID
    if birth_date is not None and birth_date >= today:
        errors["birthDate"] = BIRTH_DATE_NOT_PAST
    # blank phone numbers mean "no phone number"
    if not _blank(phone_number) and not PHONE_RE.fullmatch(phone_number):
        errors["phoneNumber"] = PHONE_INVALID


def validate_user_in(payload: UserIn, today: date) -> Dict[str, str]:
    """Rules for a full user body (create and full replace)."""
    errors: Dict[str, str] = {}
    if _blank(payload.email):
        errors["email"] = EMAIL_BLANK
    if _blank(payload.first_name):
        errors["firstName"] = FIRST_NAME_BLANK
    if _blank(payload.last_name):
        errors["lastName"] = LAST_NAME_BLANK
    if payload.birth_date is None:
        errors["birthDate"] = BIRTH_DATE_MISSING
    _check_formats(errors, payload.email, payload.birth_date, payload.phone_number, today)
    return errors


def validate_user_patch_in(payload: UserPatchIn, today: date) -> Dict[str, str]:
    """Rules for a partial body: only supplied fields are checked, names may be anything."""
    errors: Dict[str, str] = {}
    _check_formats(errors, payload.email, payload.birth_date, payload.phone_number, today)
    return errors


def ensure_valid(errors: Dict[str, str]) -> None:
    if errors:
        raise ValidationFailedError(errors)
