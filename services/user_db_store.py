"""
DB-backed user store using async SQLAlchemy.

This is the relational adapter behind UserStore:
- find_by_id / find_all / find_by_birth_date_between -> SELECT
- exists_by_email / exists_by_phone_number -> SELECT id ... LIMIT 1
- save -> INSERT or UPDATE, then COMMIT
- delete -> DELETE, then COMMIT

It is used when USE_DB=true and an AsyncSession is available.
"""

from datetime import date
from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import EmailAlreadyExistsError, PhoneNumberAlreadyExistsError, ResourceNotFoundError
from models.db_models import User as UserRow
from models.user import User
from services.user_store import UserStore

logger = logging.getLogger(__name__)


class SqlUserStore(UserStore):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, user_id: int) -> Optional[User]:
        row = await self.session.get(UserRow, user_id)
        return self._to_user(row) if row else None

    async def find_all(self) -> List[User]:
        result = await self.session.execute(select(UserRow).order_by(UserRow.id))
        return [self._to_user(r) for r in result.scalars().all()]

    async def find_by_birth_date_between(self, start: date, end: date) -> List[User]:
        """
        Equivalent to:
        SELECT * FROM users WHERE birth_date BETWEEN :start AND :end
        """
        stmt = select(UserRow).where(UserRow.birth_date.between(start, end))
        result = await self.session.execute(stmt)
        return [self._to_user(r) for r in result.scalars().all()]

    async def exists_by_email(self, email: str, excluding_id: Optional[int] = None) -> bool:
        stmt = select(UserRow.id).where(UserRow.email == email)
        if excluding_id is not None:
            stmt = stmt.where(UserRow.id != excluding_id)
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def exists_by_phone_number(self, phone_number: str, excluding_id: Optional[int] = None) -> bool:
        stmt = select(UserRow.id).where(UserRow.phone_number == phone_number)
        if excluding_id is not None:
            stmt = stmt.where(UserRow.id != excluding_id)
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def save(self, user: User) -> User:
        if user.id is None:
            row = UserRow()
            self.session.add(row)
        else:
            row = await self.session.get(UserRow, user.id)
            if row is None:
                raise ResourceNotFoundError(f"User not found with id {user.id}")

        row.email = user.email
        row.first_name = user.first_name
        row.last_name = user.last_name
        row.birth_date = user.birth_date
        row.address = user.address
        row.phone_number = user.phone_number

        try:
            await self.session.commit()
        except IntegrityError as ie:
            # Another request saved the same email/phone between our check and this commit.
            await self.session.rollback()
            logger.warning("IntegrityError on save user (%s)", ie.orig)
            column = self._duplicated_column(ie)
            if column == "phone_number":
                raise PhoneNumberAlreadyExistsError(f"Phone number {user.phone_number} already exists") from ie
            if column == "email":
                raise EmailAlreadyExistsError(f"Email {user.email} already exists") from ie
            raise

        await self.session.refresh(row)
        return self._to_user(row)

    async def delete(self, user: User) -> None:
        row = await self.session.get(UserRow, user.id)
        if row is None:
            return
        # Hard delete so the row disappears from the table
        await self.session.delete(row)
        await self.session.commit()

    @staticmethod
    def _duplicated_column(ie: IntegrityError) -> Optional[str]:
        """
        Which unique column a violation is about, or None for any other
        integrity failure (NOT NULL etc.).

        SQLite: "UNIQUE constraint failed: users.email"
        MySQL:  "Duplicate entry 'a@b.com' for key 'uq_users_email'"
        """
        message = str(ie.orig).lower()
        if "unique" not in message and "duplicate" not in message:
            return None
        if "users.phone_number" in message or "uq_users_phone_number" in message:
            return "phone_number"
        if "users.email" in message or "uq_users_email" in message:
            return "email"
        return None

    @staticmethod
    def _to_user(row: UserRow) -> User:
        return User(
            id=row.id,
            email=row.email,
            first_name=row.first_name,
            last_name=row.last_name,
            birth_date=row.birth_date,
            address=row.address,
            phone_number=row.phone_number,
        )
