# api/routes_users.py
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, Response

from api.deps import get_user_service
from api.user_mapper import draft_from_user_in, patch_from_user_patch_in, user_out, users_out
from api.user_validation import ensure_valid, validate_user_in, validate_user_patch_in
from models.schemas import UserIn, UserOut, UserPatchIn
from services.user_service import UserService

router = APIRouter()

NOT_FOUND = {404: {"description": "User not found."}}
INVALID = {400: {"description": "User is not valid."}}
CONFLICT = {409: {"description": "User email or phone number is not unique."}}


@router.get("", response_model=List[UserOut], summary="Retrieves all users.")
async def get_all_users(service: UserService = Depends(get_user_service)):
    """Retrieves all users that are present in the system."""
    return users_out(await service.list_users())


# declared before /{user_id} so "search" is not parsed as an id
@router.get(
    "/search",
    response_model=List[UserOut],
    summary="Retrieves users within a specified birthdate range.",
    responses={400: {"description": "Request parameters are not valid."}},
)
async def get_users_by_birth_date_range(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    service: UserService = Depends(get_user_service),
):
    """Searches for users born between startDate and endDate, both inclusive."""
    return users_out(await service.get_users_by_birth_date_range(start_date, end_date))


@router.get("/{user_id}", response_model=UserOut, summary="Retrieves a user by ID.", responses=NOT_FOUND)
async def get_user_by_id(user_id: int, service: UserService = Depends(get_user_service)):
    return user_out(await service.get_user(user_id))


@router.post(
    "",
    response_model=UserOut,
    status_code=201,
    summary="Creates a new user.",
    responses={**INVALID, **CONFLICT},
)
async def create_user(payload: UserIn, service: UserService = Depends(get_user_service)):
    """Creates a user that has all required data including valid age and a unique email."""
    ensure_valid(validate_user_in(payload, service.today()))
    return user_out(await service.create_user(draft_from_user_in(payload)))


@router.put(
    "/{user_id}",
    response_model=UserOut,
    summary="Updates an existing user.",
    responses={**INVALID, **NOT_FOUND, **CONFLICT},
)
async def update_user(user_id: int, payload: UserIn, service: UserService = Depends(get_user_service)):
    """Replaces every field of an existing user with the provided data."""
    ensure_valid(validate_user_in(payload, service.today()))
    return user_out(await service.update_user(user_id, draft_from_user_in(payload)))


@router.patch(
    "/{user_id}",
    response_model=UserOut,
    summary="Partially updates an existing user.",
    responses={**INVALID, **NOT_FOUND, **CONFLICT},
)
async def partial_update_user(user_id: int, payload: UserPatchIn, service: UserService = Depends(get_user_service)):
    """Updates only the user's fields that are not null in the input object."""
    ensure_valid(validate_user_patch_in(payload, service.today()))
    return user_out(await service.partial_update_user(user_id, patch_from_user_patch_in(payload)))


@router.delete("/{user_id}", status_code=204, summary="Deletes a user by ID.", responses=NOT_FOUND)
async def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    await service.delete_user(user_id)
    return Response(status_code=204)
