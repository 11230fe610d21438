from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Wire models. They only coerce types; field rules (blank, pattern, past
# date) live in api/user_validation.py so every bad field is reported at once.


class UserIn(BaseModel):
    """Body of POST /api/users and PUT /api/users/{id}."""
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    birth_date: Optional[date] = Field(None, alias="birthDate")
    address: Optional[str] = None
    phone_number: Optional[str] = Field(None, alias="phoneNumber")


class UserPatchIn(BaseModel):
    """Body of PATCH /api/users/{id}; null or missing means "leave as is"."""
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    birth_date: Optional[date] = Field(None, alias="birthDate")
    address: Optional[str] = None
    phone_number: Optional[str] = Field(None, alias="phoneNumber")


class UserOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    email: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    birth_date: date = Field(..., alias="birthDate")
    address: Optional[str] = None
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
