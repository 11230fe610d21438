# api/user_mapper.py
"""Conversion between the wire models (models/schemas.py) and the internal user types."""
from typing import Iterable, List, Optional

from models.schemas import UserIn, UserOut, UserPatchIn
from models.user import User, UserDraft, UserPatch


def _phone(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


def draft_from_user_in(payload: UserIn) -> UserDraft:
    """Call only after validate_user_in passed; required fields are set by then."""
    return UserDraft(
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        birth_date=payload.birth_date,
        address=payload.address,
        phone_number=_phone(payload.phone_number),
    )


def patch_from_user_patch_in(payload: UserPatchIn) -> UserPatch:
    """Only non-null fields become part of the patch."""
    supplied = payload.model_dump(exclude_none=True)
    if "phone_number" in supplied:
        phone = _phone(supplied.pop("phone_number"))
        if phone is not None:
            supplied["phone_number"] = phone
    return UserPatch(**supplied)


def user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        birth_date=user.birth_date,
        address=user.address,
        phone_number=user.phone_number,
    )


def users_out(users: Iterable[User]) -> List[UserOut]:
    return [user_out(u) for u in users]
