"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import WriteFailure
from infrastructure.database.repositories.sqlalchemy_activity_repo import SQLAlchemyActivityRepository
from infrastructure.database.repositories.sqlalchemy_profile_repo import SQLAlchemyProfileRepository


class SQLAlchemyUnitOfWork:
    """One session per ``async with`` block; repositories share it."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._profiles: Optional[SQLAlchemyProfileRepository] = None
        self._activities: Optional[SQLAlchemyActivityRepository] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        session = self._require_session()
        if self._profiles is None:
            self._profiles = SQLAlchemyProfileRepository(session)
        return self._profiles

    @property
    def activities(self) -> SQLAlchemyActivityRepository:
        session = self._require_session()
        if self._activities is None:
            self._activities = SQLAlchemyActivityRepository(session)
        return self._activities

    async def commit(self) -> None:
        """Commit the current transaction."""
        session = self._require_session()
        try:
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            raise WriteFailure("commit") from exc

    async def rollback(self) -> None:
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        """Roll back on error, then release the session."""
        if self._session:
            if exc_type:
                await self.rollback()
            await self._session.close()
        self._session = None
        self._profiles = None
        self._activities = None
