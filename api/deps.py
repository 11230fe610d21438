# api/deps.py
"""
Per-request wiring for the users API.

A DB session (when the DB is enabled) gives a SqlUserStore; otherwise the
app's in-memory store is used. The service gets its store and minimum age
through the constructor.
"""
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.db import get_db_session
from services.user_db_store import SqlUserStore
from services.user_service import UserService
from services.user_store import UserStore


async def get_user_store(
    request: Request,
    session: Optional[AsyncSession] = Depends(get_db_session),
) -> UserStore:
    if session is not None:
        return SqlUserStore(session)
    return request.app.state.user_store


async def get_user_service(
    request: Request,
    store: UserStore = Depends(get_user_store),
) -> UserService:
    return UserService(store, min_age=request.app.state.min_age)
