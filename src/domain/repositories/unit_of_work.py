"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.activity_repository import IActivityRepository
from domain.repositories.profile_repository import IProfileRepository


class IUnitOfWork(Protocol):
    """One store transaction over the profile and activity collections.

    Nothing written through ``profiles`` or ``activities`` is visible to
    other readers until ``commit``; leaving the context without committing
    discards it.
    """

    profiles: IProfileRepository
    activities: IActivityRepository

    async def commit(self) -> None:
        """Make the writes visible. Raises WriteFailure if the store refuses."""
        ...

    async def rollback(self) -> None:
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        ...
