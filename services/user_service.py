"""
User service: the operations behind /api/users.

Each operation validates, checks uniqueness and persists in a fixed order and
stops at the first failure, so nothing is saved for a rejected request. The
service holds no state of its own beyond the injected store, minimum age and
clock, which makes one instance per request cheap and safe.

Check-then-save is not atomic here; the store's unique constraints catch the
race between two concurrent writers (see SqlUserStore.save).
"""
from datetime import date
from typing import Callable, List, Optional
import logging

from core.errors import EmailAlreadyExistsError, PhoneNumberAlreadyExistsError, ResourceNotFoundError
from models.user import User, UserDraft, UserPatch
from services.user_rules import merge_full, merge_partial, validate_age, validate_date_range
from services.user_store import UserStore

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: UserStore, min_age: int, today: Callable[[], date] = date.today):
        self.store = store
        self.min_age = min_age
        self.today = today

    async def list_users(self) -> List[User]:
        return await self.store.find_all()

    async def get_user(self, user_id: int) -> User:
        user = await self.store.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError(f"User not found with id {user_id}")
        return user

    async def check_email_unique(self, email: str, excluding_id: Optional[int] = None) -> None:
        if await self.store.exists_by_email(email, excluding_id):
            logger.info("Rejected duplicate email for user id=%s", excluding_id)
            raise EmailAlreadyExistsError(f"Email {email} already exists")

    async def check_phone_unique(self, phone_number: Optional[str], excluding_id: Optional[int] = None) -> None:
        if not phone_number:
            return
        if await self.store.exists_by_phone_number(phone_number, excluding_id):
            logger.info("Rejected duplicate phone number for user id=%s", excluding_id)
            raise PhoneNumberAlreadyExistsError(f"Phone number {phone_number} already exists")

    async def create_user(self, draft: UserDraft) -> User:
        validate_age(draft.birth_date, self.min_age, self.today())
        await self.check_email_unique(draft.email)
        await self.check_phone_unique(draft.phone_number)
        created = await self.store.save(User(**draft.model_dump()))
        logger.info("Created user id=%s", created.id)
        return created

    async def update_user(self, user_id: int, draft: UserDraft) -> User:
        """Full replace. Uniqueness is checked before the new birth date's age."""
        existing = await self.get_user(user_id)
        await self.check_email_unique(draft.email, existing.id)
        await self.check_phone_unique(draft.phone_number, existing.id)
        merged = merge_full(existing, draft, self.min_age, self.today())
        updated = await self.store.save(merged)
        logger.info("Updated user id=%s", updated.id)
        return updated

    async def partial_update_user(self, user_id: int, patch: UserPatch) -> User:
        existing = await self.get_user(user_id)
        if patch.supplied("email"):
            await self.check_email_unique(patch.email, existing.id)
        if patch.supplied("phone_number"):
            await self.check_phone_unique(patch.phone_number, existing.id)
        merged = merge_partial(existing, patch, self.min_age, self.today())
        updated = await self.store.save(merged)
        logger.info("Partially updated user id=%s fields=%s", updated.id, sorted(patch.model_fields_set))
        return updated

    async def delete_user(self, user_id: int) -> None:
        user = await self.get_user(user_id)
        await self.store.delete(user)
        logger.info("Deleted user id=%s", user_id)

    async def get_users_by_birth_date_range(self, start: date, end: date) -> List[User]:
        validate_date_range(start, end)
        return await self.store.find_by_birth_date_between(start, end)
