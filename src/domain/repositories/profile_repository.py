"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import UserProfile


class IProfileRepository(Protocol):
    """Repository interface for the ``users/{uid}`` documents."""

    async def read(self, user_id: str) -> UserProfile | None:
        """Get the profile stored for a user, or None if absent."""
        ...

    async def write(self, profile: UserProfile) -> UserProfile:
        """Store a profile, resolving server value sentinels."""
        ...
