# models/user.py
from datetime import date
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """A user as the service sees it; id is None until the store saves it."""
    id: Optional[int] = None
    email: str
    first_name: str
    last_name: str
    birth_date: date
    address: Optional[str] = None
    phone_number: Optional[str] = None


class UserDraft(BaseModel):
    """Every mutable field of a user, used for create and full replace."""
    email: str
    first_name: str
    last_name: str
    birth_date: date
    address: Optional[str] = None
    phone_number: Optional[str] = None


class UserPatch(BaseModel):
    """Sparse set of mutable fields.

    A field counts as supplied only if it was passed to the constructor
    (see model_fields_set) with a non-null value; everything else is left
    alone by a partial merge. So a patch can never clear a field.
    """
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_date: Optional[date] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None

    def supplied(self, field: str) -> bool:
        return field in self.model_fields_set and getattr(self, field) is not None
