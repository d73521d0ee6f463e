"""SQLAlchemy implementation of Profile repository."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ReadFailure, WriteFailure
from domain.entities.profile import UserProfile
from infrastructure.database.models import UserProfileModel
from infrastructure.database.server_values import resolve_timestamp


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def read(self, user_id: str) -> UserProfile | None:
        """Get the profile stored for a user, or None if absent."""
        try:
            model = await self._session.get(UserProfileModel, user_id)
        except SQLAlchemyError as exc:
            raise ReadFailure(f"users/{user_id}") from exc
        return self._to_entity(model) if model else None

    async def write(self, profile: UserProfile) -> UserProfile:
        """Store a profile (insert or replace), resolving ``joined_date``."""
        model = self._to_model(profile)
        try:
            model = await self._session.merge(model)
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise WriteFailure(f"users/{profile.user_id}") from exc
        return self._to_entity(model)

    def _to_entity(self, model: UserProfileModel) -> UserProfile:
        """Convert ORM model to domain entity."""
        return UserProfile(
            user_id=model.user_id,
            display_name=model.display_name,
            birthdate=model.birthdate,
            email=model.email,
            profile_complete=model.profile_complete,
            joined_date=model.joined_date,
        )

    def _to_model(self, entity: UserProfile) -> UserProfileModel:
        """Convert domain entity to ORM model."""
        return UserProfileModel(
            user_id=entity.user_id,
            display_name=entity.display_name,
            birthdate=entity.birthdate,
            email=entity.email,
            profile_complete=entity.profile_complete,
            joined_date=resolve_timestamp(entity.joined_date),
        )
