"""
User storage port and the in-memory adapter.

UserService only talks to a UserStore. Two adapters exist:
- InMemoryUserStore (this module): dev / tests, used when the DB is disabled
- SqlUserStore (services/user_db_store.py): async SQLAlchemy over the users table
"""
from abc import ABC, abstractmethod
from datetime import date
from itertools import count
from typing import Dict, List, Optional
import logging

from models.user import User

logger = logging.getLogger(__name__)


class UserStore(ABC):
    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    async def find_all(self) -> List[User]:
        ...

    @abstractmethod
    async def find_by_birth_date_between(self, start: date, end: date) -> List[User]:
        """Users born within [start, end], both ends inclusive."""

    @abstractmethod
    async def exists_by_email(self, email: str, excluding_id: Optional[int] = None) -> bool:
        ...

    @abstractmethod
    async def exists_by_phone_number(self, phone_number: str, excluding_id: Optional[int] = None) -> bool:
        ...

    @abstractmethod
    async def save(self, user: User) -> User:
        """Insert (assigning an id) when user.id is None, otherwise overwrite."""

    @abstractmethod
    async def delete(self, user: User) -> None:
        ...


class InMemoryUserStore(UserStore):
    def __init__(self):
        self.users: Dict[int, User] = {}
        self._ids = count(1)

    async def find_by_id(self, user_id: int) -> Optional[User]:
        user = self.users.get(user_id)
        return user.model_copy() if user else None

    async def find_all(self) -> List[User]:
        return [u.model_copy() for u in self.users.values()]

    async def find_by_birth_date_between(self, start: date, end: date) -> List[User]:
        return [u.model_copy() for u in self.users.values() if start <= u.birth_date <= end]

    async def exists_by_email(self, email: str, excluding_id: Optional[int] = None) -> bool:
        return any(u.email == email and u.id != excluding_id for u in self.users.values())

    async def exists_by_phone_number(self, phone_number: str, excluding_id: Optional[int] = None) -> bool:
        return any(u.phone_number == phone_number and u.id != excluding_id for u in self.users.values())

    async def save(self, user: User) -> User:
        if user.id is None:
            user = user.model_copy(update={"id": next(self._ids)})
            logger.debug("In-memory insert user id=%s", user.id)
        self.users[user.id] = user.model_copy()
        return user.model_copy()

    async def delete(self, user: User) -> None:
        self.users.pop(user.id, None)
