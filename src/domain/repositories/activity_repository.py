"""Activity collection repository and live-update channel protocols."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from domain.entities.activity import ActivityDraft

SnapshotCallback = Callable[[dict[str, Any] | None], Awaitable[None]]


class IActivityRepository(Protocol):
    """Repository interface for the ``activities/{uid}`` collection."""

    def append(self, user_id: str) -> str:
        """Generate a new, unused key in the user's collection."""
        ...

    async def write(self, user_id: str, key: str, draft: ActivityDraft) -> dict[str, Any]:
        """Store a document under ``activities/{user_id}/{key}``.

        Returns the stored fields with server values resolved.
        """
        ...

    async def snapshot(self, user_id: str) -> dict[str, dict[str, Any]] | None:
        """Get the whole collection as key -> raw fields, or None if empty."""
        ...


class ISubscription(Protocol):
    """A standing live-update registration."""

    active: bool

    def cancel(self) -> None:
        ...


class ISnapshotChannel(Protocol):
    """Publish/subscribe of full collection snapshots by path."""

    def subscribe(self, path: str, callback: SnapshotCallback) -> ISubscription:
        ...

    async def publish(self, path: str, snapshot: dict[str, Any] | None) -> None:
        ...
