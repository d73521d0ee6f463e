"""Activity store service: appends records and feeds live subscribers."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from core.clock import Clock, SystemClock, calendar_day, clock_time
from domain.entities.activity import ActivityDraft, ActivityRecord
from domain.entities.server_value import ServerValue
from domain.repositories.activity_repository import (
    ISnapshotChannel,
    ISubscription,
    SnapshotCallback,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.validation import validate_activity

logger = structlog.get_logger()


def collection_path(user_id: str) -> str:
    return f"activities/{user_id}"


class ActivityService:
    """Service layer for a user's activity collection."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        channel: ISnapshotChannel,
        clock: Clock | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._channel = channel
        self._clock = clock or SystemClock()

    async def log(
        self,
        user_id: str,
        description: Any,
        duration: Any,
        client_time: datetime | None = None,
    ) -> ActivityRecord:
        """Validate and append a new activity, then notify subscribers.

        Args:
            user_id: Owner of the collection.
            description: Raw form value; must be non-empty.
            duration: Raw form value; must be a positive whole number of minutes.
            client_time: The submitter's local clock. ``date`` and ``time`` are
                captured from it; the server clock is used when absent.

        Returns:
            The stored record, with the server-assigned timestamp.

        Raises:
            ValidationFailure: If a field is missing or invalid (nothing is written).
            WriteFailure: If the store rejects the write.
        """
        submission = validate_activity(description, duration)
        moment = client_time or self._clock.now()

        draft = ActivityDraft(
            description=submission.description,
            duration=submission.duration,
            date=calendar_day(moment),
            time=clock_time(moment),
            timestamp=ServerValue.TIMESTAMP,
        )

        async with self._uow_factory() as uow:
            key = uow.activities.append(user_id)
            stored = await uow.activities.write(user_id, key, draft)
            await uow.commit()

        logger.info(
            "activity_logged",
            user_id=user_id,
            activity_id=key,
            duration=submission.duration,
            date=draft.date,
        )

        await self.publish(user_id)
        return ActivityRecord.decode(key, stored)

    async def snapshot(self, user_id: str) -> dict[str, dict[str, Any]] | None:
        """Current contents of the user's collection, or None when empty."""
        async with self._uow_factory() as uow:
            return await uow.activities.snapshot(user_id)  # type: ignore[no-any-return]

    async def subscribe(self, user_id: str, callback: SnapshotCallback) -> ISubscription:
        """Register for live updates; the current snapshot is delivered at once."""
        subscription = self._channel.subscribe(collection_path(user_id), callback)
        await callback(await self.snapshot(user_id))
        return subscription

    async def publish(self, user_id: str) -> None:
        await self._channel.publish(collection_path(user_id), await self.snapshot(user_id))
