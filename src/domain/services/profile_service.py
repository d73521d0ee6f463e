"""Profile service layer."""

from collections.abc import Callable
from typing import Any

import structlog

from core.exceptions import ProfileAlreadyCompleteError, ProfileNotFoundError, ReadFailure
from domain.entities.profile import UserProfile
from domain.entities.server_value import ServerValue
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.validation import validate_profile

logger = structlog.get_logger()


class ProfileService:
    """Reads and writes the single ``users/{uid}`` profile of each user."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get(self, user_id: str) -> UserProfile | None:
        """Get a user's profile. A failed read counts as no profile."""
        try:
            async with self._uow_factory() as uow:
                return await uow.profiles.read(user_id)  # type: ignore[no-any-return]
        except ReadFailure as exc:
            logger.warning("profile_read_failed", user_id=user_id, error=exc.message)
            return None

    async def get_by_id(self, user_id: str) -> UserProfile:
        profile = await self.get(user_id)
        if not profile:
            raise ProfileNotFoundError(user_id)
        return profile

    async def complete(
        self,
        user_id: str,
        email: str,
        display_name: Any,
        birthdate: Any,
    ) -> UserProfile:
        """Create the user's profile from the one-time setup form.

        Raises:
            ValidationFailure: If display name or birthdate is empty.
            ProfileAlreadyCompleteError: If the profile was already written.
            WriteFailure: If the store rejects the write.
        """
        submission = validate_profile(display_name, birthdate)

        async with self._uow_factory() as uow:
            existing = await uow.profiles.read(user_id)
            if existing and existing.is_complete:
                raise ProfileAlreadyCompleteError(user_id)

            profile = await uow.profiles.write(
                UserProfile(
                    user_id=user_id,
                    display_name=submission.display_name,
                    birthdate=submission.birthdate,
                    email=email,
                    profile_complete=True,
                    joined_date=ServerValue.TIMESTAMP,
                )
            )
            await uow.commit()

        logger.info("profile_saved", user_id=user_id)
        return profile  # type: ignore[no-any-return]
