"""SQLAlchemy implementation of Activity repository."""

from collections.abc import Callable
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ReadFailure, WriteFailure
from domain.entities.activity import ActivityDraft
from infrastructure.database.models import ActivityModel
from infrastructure.database.server_values import generate_push_key, resolve_timestamp


class SQLAlchemyActivityRepository:
    """SQLAlchemy implementation of IActivityRepository."""

    def __init__(
        self,
        session: AsyncSession,
        key_generator: Callable[[], str] = generate_push_key,
    ) -> None:
        self._session = session
        self._key_generator = key_generator

    def append(self, user_id: str) -> str:
        """Generate a new key; push keys are unique without a lookup."""
        return self._key_generator()

    async def write(self, user_id: str, key: str, draft: ActivityDraft) -> dict[str, Any]:
        """Insert an activity document under the given key."""
        model = ActivityModel(
            user_id=user_id,
            id=key,
            description=draft.description,
            duration=draft.duration,
            timestamp=resolve_timestamp(draft.timestamp),
            date=draft.date,
            time=draft.time,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise WriteFailure(f"activities/{user_id}/{key}") from exc
        return self._to_document(model)

    async def snapshot(self, user_id: str) -> dict[str, dict[str, Any]] | None:
        """Get every activity of a user as key -> document, or None if none."""
        stmt = (
            select(ActivityModel)
            .where(ActivityModel.user_id == user_id)
            .order_by(ActivityModel.id)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise ReadFailure(f"activities/{user_id}") from exc

        documents = {model.id: self._to_document(model) for model in result.scalars()}
        return documents or None

    def _to_document(self, model: ActivityModel) -> dict[str, Any]:
        """Convert ORM model to the raw document shape subscribers receive."""
        return {
            "description": model.description,
            "duration": model.duration,
            "timestamp": model.timestamp,
            "date": model.date,
            "time": model.time,
        }
