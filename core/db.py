"""
Async database engine and session management.

Purpose:
- Create SQLAlchemy async engine (MySQL with aiomysql driver by default)
- Provide async session factory for dependency injection
- Provide Base declarative class for ORM models

create_db() builds the engine from the Settings handed to create_app, and the
app keeps it on app.state. When USE_DB is false or MYSQL_ASYNC_URL is
"disabled" no engine is created and get_db_session yields None, so callers
fall back to the in-memory user store.
"""
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from config.settings import Settings
import logging
from typing import AsyncGenerator, Optional, Tuple

logger = logging.getLogger(__name__)

Base = declarative_base()


def db_enabled(settings: Settings) -> bool:
	return bool(settings.USE_DB and settings.MYSQL_ASYNC_URL and settings.MYSQL_ASYNC_URL != "disabled")


def create_db(settings: Settings) -> Tuple[Optional[AsyncEngine], Optional[async_sessionmaker[AsyncSession]]]:
	if not db_enabled(settings):
		logger.warning("Database disabled (USE_DB=%s) – DB engine will not be created; using in-memory user store.", settings.USE_DB)
		return None, None

	engine = create_async_engine(
		settings.MYSQL_ASYNC_URL,
		echo=settings.DEBUG,
		future=True,
	)
	session_maker = async_sessionmaker(
		engine, expire_on_commit=False, class_=AsyncSession
	)
	logger.info("Async DB engine created")
	return engine, session_maker


async def get_db_session(request: Request) -> AsyncGenerator[Optional[AsyncSession], None]:
	"""
	Yield an AsyncSession when the app has a DB; otherwise yield None so callers can
	fall back to the in-memory user store.
	"""
	session_maker = request.app.state.session_maker
	if session_maker is None:
		yield None
		return

	async with session_maker() as session:
		try:
			yield session
		finally:
			await session.close()
